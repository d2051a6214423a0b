"""Services package - statistic evaluation engine."""

from statkit.services.cache import MISS, CacheEntry, TTLCache, fingerprint
from statkit.services.filters import FilterRuleResolver, day_window, time_range_window
from statkit.services.registry import StatisticRegistry
from statkit.services.retry import DEFAULT_RETRYABLE, RetryPolicy

__all__ = [
    # Cache
    "MISS",
    "CacheEntry",
    "TTLCache",
    "fingerprint",
    # Filters
    "FilterRuleResolver",
    "day_window",
    "time_range_window",
    # Retry
    "DEFAULT_RETRYABLE",
    "RetryPolicy",
    # Registry
    "StatisticRegistry",
]
