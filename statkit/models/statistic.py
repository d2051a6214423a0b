"""Statistic definitions and the models they are declared on."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from statkit.errors import InvalidStatisticError
from statkit.models.filters import FilterRule
from statkit.models.options import Option

ALL = "all"


class Operation(StrEnum):
    """Supported aggregate operations."""

    COUNT = "count"
    SUM = "sum"
    AVERAGE = "average"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"


SQL_FUNCTIONS = {
    Operation.COUNT: "COUNT",
    Operation.SUM: "SUM",
    Operation.AVERAGE: "AVG",
    Operation.MINIMUM: "MIN",
    Operation.MAXIMUM: "MAX",
}


@dataclass(frozen=True)
class TableModel:
    """A queryable model type: table name plus its named scopes.

    A scope is either a raw SQL condition or a function taking and
    returning a StatQuery.
    """

    name: str
    table: str
    scopes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StatisticDefinition:
    """One registered statistic. Either aggregate-based or derived."""

    name: Any
    operation: Operation | None = Operation.COUNT
    column: str = "id"
    scopes: tuple[str, ...] = (ALL,)
    filter_on: Mapping[str, FilterRule] = field(default_factory=dict)
    conditions: tuple[Option, ...] = ()
    joins: Option | None = None
    cache_for: Option | None = None
    derivation: Callable[[Callable[[Any], Any]], Any] | None = None

    def __post_init__(self):
        if (self.operation is None) == (self.derivation is None):
            raise InvalidStatisticError(f"Statistic {self.name!r} needs exactly one of operation or derivation")

    @property
    def derived(self) -> bool:
        return self.derivation is not None

    @property
    def cacheable(self) -> bool:
        return self.cache_for is not None

    @property
    def chains_scopes(self) -> bool:
        return tuple(self.scopes) != (ALL,)
