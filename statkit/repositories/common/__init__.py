"""Common repositories - cache storage."""

from statkit.repositories.common.cache import CacheRepository, MemoryStore

__all__ = [
    "CacheRepository",
    "MemoryStore",
]
