"""Cache repositories - key/value storage behind the statistic cache."""

import json
import threading
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from loguru import logger

from statkit.repositories.base import BaseRepository
from statkit.repositories.db import init_tables

_TYPE_TAG = "__type__"


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return {_TYPE_TAG: "decimal", "v": str(value)}
    if isinstance(value, datetime):
        return {_TYPE_TAG: "datetime", "v": value.isoformat()}
    if isinstance(value, date):
        return {_TYPE_TAG: "date", "v": value.isoformat()}
    raise TypeError(f"Cannot cache value of type {type(value).__name__}")


def _json_object_hook(obj: dict) -> Any:
    kind = obj.get(_TYPE_TAG)
    if kind == "decimal":
        return Decimal(obj["v"])
    if kind == "datetime":
        return datetime.fromisoformat(obj["v"])
    if kind == "date":
        return date.fromisoformat(obj["v"])
    return obj


class MemoryStore:
    """Process-local key/value store."""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(key)

    def write(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self, prefix: str | None = None) -> None:
        with self._lock:
            if prefix is None:
                self._data.clear()
            else:
                for key in [k for k in self._data if k.startswith(prefix)]:
                    del self._data[key]
        logger.info("Memory cache cleared (prefix={})", prefix)


class CacheRepository(BaseRepository):
    """DuckDB-backed key/value store for computed statistics."""

    def __init__(self, read_only: bool = True, conn=None):
        super().__init__(read_only=read_only, conn=conn)
        if not read_only:
            init_tables(self._db)

    def read(self, key: str) -> Any | None:
        """Load a cached entry."""
        row = self.fetchone("SELECT data FROM stat_cache WHERE key = ?", [key])
        if row:
            return json.loads(row[0], object_hook=_json_object_hook)
        return None

    def write(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Save an entry, replacing any previous one."""
        if self._read_only:
            raise RuntimeError("Cannot write cache in read-only mode")

        self.execute(
            """
            INSERT OR REPLACE INTO stat_cache (key, data, written_at)
            VALUES (?, ?, ?)
            """,
            [key, json.dumps(value, default=_json_default), datetime.now()],
        )
        logger.debug("Cache saved: {}", key)

    def delete(self, key: str) -> None:
        if self._read_only:
            raise RuntimeError("Cannot delete cache in read-only mode")
        self.execute("DELETE FROM stat_cache WHERE key = ?", [key])

    def clear(self, prefix: str | None = None) -> None:
        """Clear cache entries, optionally only those under a key prefix."""
        if self._read_only:
            raise RuntimeError("Cannot clear cache in read-only mode")

        if prefix:
            self.execute("DELETE FROM stat_cache WHERE starts_with(key, ?)", [prefix])
            logger.info("Cache cleared for {}", prefix)
        else:
            self.execute("DELETE FROM stat_cache")
            logger.info("All cache cleared")

    def exists(self, prefix: str) -> bool:
        """Check if any entry is cached under a key prefix."""
        row = self.fetchone("SELECT COUNT(*) FROM stat_cache WHERE starts_with(key, ?)", [prefix])
        return row[0] > 0
