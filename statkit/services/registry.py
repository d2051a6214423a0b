"""Statistic registry - definition storage and evaluation."""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import ValidationError

from statkit.errors import InvalidStatisticError
from statkit.models import (
    FilterRule,
    Operation,
    StatisticDefinition,
    StatisticItem,
    StatisticOptions,
    StatisticsSnapshot,
    TableModel,
    as_ttl,
    parse_rule,
)
from statkit.repositories.common import MemoryStore
from statkit.repositories.query import QueryEngine, StatQuery
from statkit.services.cache import MISS, TTLCache, fingerprint
from statkit.services.filters import FilterRuleResolver
from statkit.services.retry import RetryPolicy


class StatisticRegistry:
    """Named statistics of one model type.

    Aggregate statistics are compiled to a StatQuery: scopes, static
    conditions, joins and one predicate per filter, then a single
    aggregate. Calculated statistics are computed from sibling values
    with the same filters. Statistics with `cache_for` are memoized by
    (model, name, filters) fingerprint.
    """

    def __init__(
        self,
        model: TableModel,
        engine: QueryEngine,
        cache: TTLCache | None = None,
        retry: RetryPolicy | None = None,
        resolver: FilterRuleResolver | None = None,
        default_rules: Mapping[str, FilterRule] | None = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.model = model
        self._engine = engine
        self._cache = cache if cache is not None else TTLCache(MemoryStore())
        self._retry = retry or RetryPolicy()
        self._resolver = resolver or FilterRuleResolver(clock=now)
        self._now = now
        # Shared with the container; later updates are seen here.
        self._default_rules = default_rules if default_rules is not None else {}
        self._model_rules: dict[str, FilterRule] = {}
        self._definitions: dict[Any, StatisticDefinition] = {}
        logger.debug("StatisticRegistry created for {}", model.name)

    # ========== Definitions ==========

    def register(self, definition: StatisticDefinition) -> StatisticDefinition:
        """Add a definition; an existing name is replaced in place."""
        if definition.name in self._definitions:
            logger.debug("{}: redefining statistic {!r}", self.model.name, definition.name)
        self._definitions[definition.name] = definition
        return definition

    def register_calculated(
        self,
        name: Any,
        derivation: Callable[[Callable[[Any], Any]], Any],
        cache_for: Any = None,
    ) -> StatisticDefinition:
        """Add a statistic computed from siblings.

        `derivation` receives a lookup `stat(name)` returning the sibling's
        value for the same filters.
        """
        definition = StatisticDefinition(
            name=name,
            operation=None,
            derivation=derivation,
            cache_for=as_ttl(cache_for),
        )
        return self.register(definition)

    define_calculated = register_calculated

    def define(self, name: Any, **options) -> StatisticDefinition:
        """Define an aggregate statistic.

        The operation can be given as `operation=` or as a keyword named
        after it holding the scopes, e.g. `sum="all", column="amount"`.
        """
        for operation in Operation:
            if operation.value in options:
                options["operation"] = operation
                options["scopes"] = options.pop(operation.value)
                break

        try:
            definition = StatisticOptions(**options).to_definition(name)
        except ValidationError as exc:
            raise InvalidStatisticError(f"Invalid options for statistic {name!r}: {exc}") from exc
        return self.register(definition)

    def filter_all_on(self, key: str, rule: Any) -> None:
        """Filter rule shared by every statistic of this model."""
        self._model_rules[key] = parse_rule(rule)

    def names(self) -> list[Any]:
        """Registered names in declaration order."""
        return list(self._definitions)

    def definition(self, name: Any) -> StatisticDefinition | None:
        return self._definitions.get(name)

    def rules_for(self, definition: StatisticDefinition) -> dict[str, FilterRule]:
        """Process defaults < model rules < statistic rules."""
        return {**self._default_rules, **self._model_rules, **definition.filter_on}

    # ========== Evaluation ==========

    def fingerprint(self, name: Any, filters: Mapping | None = None) -> str:
        return fingerprint(self.model.name, name, filters or {})

    def evaluate(self, name: Any, filters: Mapping | None = None) -> Any:
        """Value of one statistic; None when no statistic has that name."""
        definition = self._definitions.get(name)
        if definition is None:
            logger.debug("{}: no statistic named {!r}", self.model.name, name)
            return None

        filters = dict(filters or {})
        key = None
        if definition.cacheable:
            key = self.fingerprint(name, filters)
            cached = self._cache.get(key)
            if cached is not MISS:
                return cached

        if definition.derived:
            value = definition.derivation(lambda sibling: self.evaluate(sibling, filters))
        else:
            query = self._build_query(definition, filters)
            value = query.aggregate(definition.operation, definition.column)

        if key is not None:
            self._cache.put(key, value, definition.cache_for.resolve(filters))

        return value

    def evaluate_with_retry(self, name: Any, filters: Mapping | None = None) -> Any:
        return self._retry.run(self.evaluate, name, filters)

    get = evaluate_with_retry

    def evaluate_fresh(self, name: Any, filters: Mapping | None = None) -> Any:
        """Skip any cached value and recompute."""
        self.invalidate(name, filters)
        return self.evaluate(name, filters)

    def get_fresh(self, name: Any, filters: Mapping | None = None) -> Any:
        return self._retry.run(self.evaluate_fresh, name, filters)

    def evaluate_all(self, filters: Mapping | None = None, exclude: Any = None) -> dict[Any, Any]:
        """Every statistic except `exclude`, keyed by name."""
        return {name: self.evaluate_with_retry(name, filters) for name in self._definitions if name != exclude}

    all = evaluate_all

    def snapshot(self, filters: Mapping | None = None, exclude: Any = None) -> StatisticsSnapshot:
        """All statistics as a serializable report."""
        values = self.evaluate_all(filters, exclude)
        return StatisticsSnapshot(
            model=self.model.name,
            filters={str(k): v for k, v in (filters or {}).items()},
            items=[StatisticItem(name=str(name), value=value) for name, value in values.items()],
            computed_at=self._now(),
        )

    def invalidate(self, name: Any, filters: Mapping | None = None) -> None:
        """Drop the cached value for (name, filters)."""
        self._cache.invalidate(self.fingerprint(name, filters))

    def query_for(self, name: Any, filters: Mapping | None = None) -> StatQuery | None:
        """Unexecuted query behind an aggregate statistic.

        Calculated and unknown statistics have no query and return None.
        """
        definition = self._definitions.get(name)
        if definition is None or definition.derived:
            logger.debug("{}: no query for {!r}", self.model.name, name)
            return None
        return self._build_query(definition, dict(filters or {}))

    def _build_query(self, definition: StatisticDefinition, filters: dict) -> StatQuery:
        query = self._engine.base(self.model)

        if definition.chains_scopes:
            for scope in definition.scopes:
                query = query.scope(scope)

        for condition in definition.conditions:
            query = query.where(condition.resolve(filters))

        if definition.joins is not None:
            query = query.join(definition.joins.resolve(filters))

        rules = self.rules_for(definition)
        for key, value in filters.items():
            if value is None:
                continue
            query = query.where(self._resolver.resolve_filter(key, value, rules, self.model.table))

        return query
