"""TTL cache for computed statistics."""

import json
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol

from loguru import logger

from statkit.models import BaseEntity

MISS = object()


class KeyValueStore(Protocol):
    def read(self, key: str) -> Any | None: ...

    def write(self, key: str, value: Any, ttl: timedelta | None = None) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass
class CacheEntry(BaseEntity):
    """Cached value with its absolute expiry time."""

    fingerprint: str
    value: Any
    expires_at: float


def fingerprint(model: str, name: Any, filters: Mapping) -> str:
    """Deterministic cache key; filter order and None values do not matter."""
    canonical = json.dumps(
        {str(k): v for k, v in filters.items() if v is not None},
        sort_keys=True,
        default=str,
        separators=(",", ":"),
    )
    return f"{model}/{name}/{canonical}"


def _seconds(ttl: timedelta | float | int) -> float:
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


class TTLCache:
    """Fingerprint -> value with lazy expiry against an injected clock."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def get(self, key: str) -> Any:
        """Cached value, or MISS when absent or expired."""
        data = self._store.read(key)
        if data is None:
            logger.debug("Cache miss: {}", key)
            return MISS

        entry = CacheEntry.from_dict(data)
        if self._clock() >= entry.expires_at:
            logger.debug("Cache expired: {}", key)
            self._store.delete(key)
            return MISS

        logger.debug("Cache hit: {}", key)
        return entry.value

    def put(self, key: str, value: Any, ttl: timedelta | float | int) -> None:
        """Store a value; a zero TTL is already expired on the next read."""
        seconds = max(_seconds(ttl), 0.0)
        entry = CacheEntry(fingerprint=key, value=value, expires_at=self._clock() + seconds)
        self._store.write(key, entry.to_dict(), timedelta(seconds=seconds))
        logger.debug("Cache stored: {} (ttl={}s)", key, seconds)

    def invalidate(self, key: str) -> None:
        self._store.delete(key)
        logger.debug("Cache invalidated: {}", key)
