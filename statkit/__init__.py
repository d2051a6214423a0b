"""Reusable, cacheable aggregate statistics over DuckDB tables."""

from statkit.container import Container, container
from statkit.errors import (
    InvalidStatisticError,
    StatisticsError,
    TransientBackendError,
    UnknownFilterKeyError,
    UnknownScopeError,
)
from statkit.models import (
    ALL,
    DAY_RANGE,
    DEFAULT,
    Computed,
    Literal,
    Operation,
    Predicate,
    StatisticDefinition,
    TableModel,
    TimeWindow,
)
from statkit.repositories import QueryEngine, StatQuery
from statkit.services import RetryPolicy, StatisticRegistry, TTLCache

__all__ = [
    "Container",
    "container",
    # Errors
    "StatisticsError",
    "UnknownFilterKeyError",
    "TransientBackendError",
    "InvalidStatisticError",
    "UnknownScopeError",
    # Models
    "ALL",
    "DEFAULT",
    "DAY_RANGE",
    "Operation",
    "StatisticDefinition",
    "TableModel",
    "Predicate",
    "TimeWindow",
    "Literal",
    "Computed",
    # Engine
    "QueryEngine",
    "StatQuery",
    "TTLCache",
    "RetryPolicy",
    "StatisticRegistry",
]
