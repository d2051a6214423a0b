"""Dependency Injection container - owns one statistic registry per model."""

import time
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

import duckdb
from loguru import logger

from statkit.models import FilterRule, TableModel, parse_rules
from statkit.repositories import CacheRepository, MemoryStore, QueryEngine, close_db, get_db
from statkit.services import FilterRuleResolver, RetryPolicy, StatisticRegistry, TTLCache
from statkit.settings import CACHE_BACKEND


class Container:
    """Application DI container - holds the shared engine, cache and registries."""

    _instance = None
    _initialized = False
    _owns_connection = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(
        self,
        conn: duckdb.DuckDBPyConnection | None = None,
        store: Any = None,
        clock: Callable[[], float] = time.time,
        now: Callable[[], datetime] = datetime.now,
        retry: RetryPolicy | None = None,
    ) -> None:
        """Initialize shared dependencies. Call once at app startup."""
        if self._initialized:
            return

        self._owns_connection = conn is None
        if conn is None:
            conn = get_db(read_only=False)

        if store is None:
            store = CacheRepository(read_only=False, conn=conn) if CACHE_BACKEND == "duckdb" else MemoryStore()

        self.engine = QueryEngine(read_only=False, conn=conn)
        self.cache = TTLCache(store, clock=clock)
        self.now = now
        self.resolver = FilterRuleResolver(clock=now)
        self.retry = retry or RetryPolicy()
        self._default_rules: dict[str, FilterRule] = {}
        self._registries: dict[str, StatisticRegistry] = {}

        self._initialized = True
        logger.info("Statistics container initialized (cache={})", type(store).__name__)

    def reset(self) -> None:
        """Forget all registries and dependencies; close the shared connection if opened here."""
        if self._initialized and self._owns_connection:
            close_db()
        self._initialized = False
        self._registries = {}
        self._default_rules = {}

    def default_filter_rules(self, rules: Mapping[str, Any]) -> None:
        """Process-wide filter rules, overridden by model and statistic rules."""
        self.init()
        self._default_rules.clear()
        self._default_rules.update(parse_rules(dict(rules)))

    def statistics(self, model: TableModel) -> StatisticRegistry:
        """Registry for `model`, created on first use."""
        self.init()
        registry = self._registries.get(model.name)
        if registry is None:
            registry = StatisticRegistry(
                model=model,
                engine=self.engine,
                cache=self.cache,
                retry=self.retry,
                resolver=self.resolver,
                default_rules=self._default_rules,
                now=self.now,
            )
            self._registries[model.name] = registry
        return registry

    def registries(self) -> dict[str, StatisticRegistry]:
        return dict(self._registries)


# Global container instance
container = Container()
