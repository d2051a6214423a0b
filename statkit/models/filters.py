"""Filter rules - how a filter key becomes a constraint."""

from dataclasses import dataclass
from typing import Any

from statkit.errors import InvalidStatisticError

TIME_RANGE_KEYS = ("range_today", "range_week", "range_month", "range_year")

DEFAULT = "default"
DAY_RANGE = "day_range"


@dataclass(frozen=True)
class Template:
    """SQL fragment with the value (and optionally the table name) substituted in."""

    pattern: str
    param_placeholder: str = "?"
    table_placeholder: str = "%t"


@dataclass(frozen=True)
class DefaultEquality:
    """`column = value` against the filter key's own column."""


@dataclass(frozen=True)
class DayRange:
    """The whole calendar day containing the value."""


@dataclass(frozen=True)
class TimeRangeWindow:
    """Current day/week/month/year over `field`."""

    field: str


@dataclass(frozen=True)
class Indirect:
    """Caller-facing alias resolved with `delegate` against `target_key`."""

    target_key: str
    delegate: "FilterRule"


FilterRule = Template | DefaultEquality | DayRange | TimeRangeWindow | Indirect

_RULE_TYPES = (Template, DefaultEquality, DayRange, TimeRangeWindow, Indirect)


def parse_rule(value: Any) -> FilterRule:
    """Turn a rule shorthand into a FilterRule.

    "default" and "day_range" name the built-in rules, a (target, rule)
    pair builds an Indirect rule and any other string is a Template.
    """
    if isinstance(value, _RULE_TYPES):
        return value
    if value == DEFAULT:
        return DefaultEquality()
    if value == DAY_RANGE:
        return DayRange()
    if isinstance(value, str):
        return Template(value)
    if isinstance(value, (tuple, list)) and len(value) == 2:
        target, delegate = value
        return Indirect(str(target), parse_rule(delegate))
    raise InvalidStatisticError(f"Unsupported filter rule: {value!r}")


def parse_rules(rules: dict | None) -> dict[str, FilterRule]:
    return {key: parse_rule(value) for key, value in (rules or {}).items()}
