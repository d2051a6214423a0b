"""Common models - base classes and shared tables."""

from statkit.models.common.base import BaseEntity
from statkit.models.common.cache import STAT_CACHE_DDL

__all__ = [
    "BaseEntity",
    "STAT_CACHE_DDL",
]
