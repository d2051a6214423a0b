"""Repositories package - data access layer for statistics."""

from statkit.repositories.base import BaseRepository
from statkit.repositories.common import CacheRepository, MemoryStore
from statkit.repositories.db import (
    close_db,
    get_db,
    init_tables,
)
from statkit.repositories.query import QueryEngine, StatQuery

__all__ = [
    # DB
    "get_db",
    "close_db",
    "init_tables",
    # Base
    "BaseRepository",
    # Query
    "QueryEngine",
    "StatQuery",
    # Cache
    "CacheRepository",
    "MemoryStore",
]
