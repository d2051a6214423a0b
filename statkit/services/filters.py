"""Filter rule resolution - filter key/value pairs to SQL predicates."""

import calendar
from collections.abc import Callable, Mapping
from datetime import date, datetime, time, timedelta
from typing import Any

from statkit.errors import UnknownFilterKeyError
from statkit.models import (
    TIME_RANGE_KEYS,
    DayRange,
    DefaultEquality,
    FilterRule,
    Indirect,
    Predicate,
    Template,
    TimeRangeWindow,
    TimeWindow,
    quote_literal,
)


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value).date()
    raise ValueError(f"Cannot read a day from {value!r}")


def day_window(day: date) -> TimeWindow:
    """Start and end of a calendar day (naive local time)."""
    return TimeWindow(datetime.combine(day, time.min), datetime.combine(day, time.max))


def time_range_window(key: str, now: datetime) -> TimeWindow:
    """Window of the current day, week (Monday start), month or year."""
    today = now.date()

    if key == "range_today":
        return day_window(today)

    if key == "range_week":
        start = today - timedelta(days=today.weekday())
        end = start + timedelta(days=6)
    elif key == "range_month":
        start = today.replace(day=1)
        end = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    elif key == "range_year":
        start = date(today.year, 1, 1)
        end = date(today.year, 12, 31)
    else:
        raise UnknownFilterKeyError(key)

    return TimeWindow(datetime.combine(start, time.min), datetime.combine(end, time.max))


class FilterRuleResolver:
    """Compiles one filter into a predicate according to its rule."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock

    def resolve(self, key: str, value: Any, rule: FilterRule, table: str) -> Predicate:
        """Predicate for `key = value` under `rule` on `table`."""
        if isinstance(rule, Template):
            sql = rule.pattern.replace(rule.table_placeholder, table)
            return Predicate.raw(sql.replace(rule.param_placeholder, quote_literal(value)))

        if isinstance(rule, DefaultEquality):
            return Predicate.match(key, value)

        if isinstance(rule, DayRange):
            window = day_window(_as_date(value))
            return Predicate.between(key, window.start, window.end)

        if isinstance(rule, TimeRangeWindow):
            window = time_range_window(key, self._clock())
            return Predicate.between(rule.field, window.start, window.end)

        if isinstance(rule, Indirect):
            if isinstance(rule.delegate, TimeRangeWindow):
                # window kind comes from the caller's range key, not the column
                return self.resolve(key, value, rule.delegate, table)
            return self.resolve(rule.target_key, value, rule.delegate, table)

        raise TypeError(f"Unsupported filter rule: {rule!r}")

    def resolve_filter(self, key: str, value: Any, rules: Mapping[str, FilterRule], table: str) -> Predicate:
        """Resolve a caller filter; range_* keys name the field to window."""
        if key in TIME_RANGE_KEYS:
            return self.resolve(key, value, TimeRangeWindow(str(value)), table)

        rule = rules.get(key)
        if rule is None:
            raise UnknownFilterKeyError(key)
        return self.resolve(key, value, rule, table)
