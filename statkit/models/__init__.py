"""Models package - statistic definitions, filter rules and DDL."""

from statkit.models.common import STAT_CACHE_DDL, BaseEntity
from statkit.models.filters import (
    DAY_RANGE,
    DEFAULT,
    TIME_RANGE_KEYS,
    DayRange,
    DefaultEquality,
    FilterRule,
    Indirect,
    Template,
    TimeRangeWindow,
    parse_rule,
    parse_rules,
)
from statkit.models.options import Computed, Literal, Option, as_option, as_ttl
from statkit.models.predicate import Predicate, TimeWindow, quote_ident, quote_literal
from statkit.models.schemas import StatisticItem, StatisticOptions, StatisticsSnapshot
from statkit.models.statistic import ALL, SQL_FUNCTIONS, Operation, StatisticDefinition, TableModel

ALL_DDL = [
    STAT_CACHE_DDL,
]

__all__ = [
    # Common
    "BaseEntity",
    "STAT_CACHE_DDL",
    "ALL_DDL",
    # Statistics
    "ALL",
    "Operation",
    "SQL_FUNCTIONS",
    "StatisticDefinition",
    "TableModel",
    "StatisticOptions",
    "StatisticItem",
    "StatisticsSnapshot",
    # Filters
    "DEFAULT",
    "DAY_RANGE",
    "TIME_RANGE_KEYS",
    "FilterRule",
    "Template",
    "DefaultEquality",
    "DayRange",
    "TimeRangeWindow",
    "Indirect",
    "parse_rule",
    "parse_rules",
    # Options
    "Literal",
    "Computed",
    "Option",
    "as_option",
    "as_ttl",
    # Predicates
    "Predicate",
    "TimeWindow",
    "quote_ident",
    "quote_literal",
]
