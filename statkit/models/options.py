"""Literal-or-computed option values."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass(frozen=True)
class Literal:
    """Option with a fixed value."""

    value: Any

    def resolve(self, filters: Mapping) -> Any:
        return self.value


@dataclass(frozen=True)
class Computed:
    """Option computed from the caller's filters."""

    fn: Callable[[Mapping], Any]

    def resolve(self, filters: Mapping) -> Any:
        return self.fn(filters)


Option = Literal | Computed


def as_option(value: Any) -> Option | None:
    """Wrap a plain value or callable; existing options pass through."""
    if value is None or isinstance(value, (Literal, Computed)):
        return value
    if callable(value):
        return Computed(value)
    return Literal(value)


def as_ttl(value: Any) -> Option | None:
    """Like as_option, but plain numbers are read as seconds."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Literal(timedelta(seconds=value))
    return as_option(value)
