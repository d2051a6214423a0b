"""Constraint fragments: SQL text plus bound parameters."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, NamedTuple


class TimeWindow(NamedTuple):
    """Closed time interval, rendered as BETWEEN."""

    start: datetime
    end: datetime


def quote_ident(name: str) -> str:
    """Quote a column identifier; dotted names are quoted per part."""
    if name == "*":
        return name
    return ".".join('"' + part.replace('"', '""') + '"' for part in str(name).split("."))


def quote_literal(value: Any) -> str:
    """Render a value as a single-quoted SQL string literal."""
    if isinstance(value, (date, datetime)):
        value = value.isoformat(sep=" ") if isinstance(value, datetime) else value.isoformat()
    return "'" + str(value).replace("'", "''") + "'"


@dataclass(frozen=True)
class Predicate:
    """A WHERE fragment with `?` placeholders."""

    sql: str
    params: tuple = field(default_factory=tuple)

    @classmethod
    def raw(cls, sql: str, params: list | tuple = ()) -> "Predicate":
        return cls(sql, tuple(params))

    @classmethod
    def between(cls, column: str, start: Any, end: Any) -> "Predicate":
        return cls(f"{quote_ident(column)} BETWEEN ? AND ?", (start, end))

    @classmethod
    def match(cls, column: str, value: Any) -> "Predicate":
        """Equality, IN for collections, BETWEEN for a TimeWindow."""
        if isinstance(value, TimeWindow):
            return cls.between(column, value.start, value.end)
        if isinstance(value, (list, tuple, set, frozenset)):
            values = list(value)
            if not values:
                return cls("1 = 0")
            marks = ", ".join("?" for _ in values)
            return cls(f"{quote_ident(column)} IN ({marks})", tuple(values))
        if value is None:
            return cls(f"{quote_ident(column)} IS NULL")
        return cls(f"{quote_ident(column)} = ?", (value,))

    @classmethod
    def from_value(cls, value: Any) -> list["Predicate"]:
        """Normalize a condition value: SQL string, Predicate or column mapping."""
        if value is None:
            return []
        if isinstance(value, Predicate):
            return [value]
        if isinstance(value, str):
            return [cls.raw(value)]
        if isinstance(value, dict):
            return [cls.match(column, v) for column, v in value.items()]
        if isinstance(value, (list, tuple)):
            return [p for item in value for p in cls.from_value(item)]
        raise TypeError(f"Unsupported condition: {value!r}")
