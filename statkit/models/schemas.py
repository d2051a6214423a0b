"""Statistic option and report schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from statkit.models.filters import parse_rules
from statkit.models.options import as_option, as_ttl
from statkit.models.statistic import ALL, Operation, StatisticDefinition


class StatisticOptions(BaseModel):
    """Options accepted when defining an aggregate statistic."""

    operation: Operation = Operation.COUNT
    scopes: tuple[str, ...] = (ALL,)
    column: str = "id"
    filter_on: dict[str, Any] = {}
    conditions: tuple[Any, ...] = ()
    joins: Any = None
    cache_for: Any = None

    class Config:
        arbitrary_types_allowed = True
        extra = "forbid"

    @field_validator("scopes", mode="before")
    @classmethod
    def _coerce_scopes(cls, value):
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple)):
            return tuple(value)
        raise ValueError(f"scopes must be a scope name or a list of names, got {value!r}")

    @field_validator("filter_on", mode="before")
    @classmethod
    def _parse_filter_on(cls, value):
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"filter_on must be a mapping, got {value!r}")
        return parse_rules(value)

    @field_validator("conditions", mode="before")
    @classmethod
    def _wrap_conditions(cls, value):
        if value is None:
            return ()
        if not isinstance(value, (list, tuple)):
            value = [value]
        return tuple(as_option(c) for c in value)

    @field_validator("joins", mode="before")
    @classmethod
    def _wrap_joins(cls, value):
        return as_option(value)

    @field_validator("cache_for", mode="before")
    @classmethod
    def _wrap_cache_for(cls, value):
        return as_ttl(value)

    def to_definition(self, name: Any) -> StatisticDefinition:
        return StatisticDefinition(
            name=name,
            operation=self.operation,
            column=self.column,
            scopes=self.scopes,
            filter_on=self.filter_on,
            conditions=self.conditions,
            joins=self.joins,
            cache_for=self.cache_for,
        )


class StatisticItem(BaseModel):
    """One computed statistic."""

    name: str
    value: Any = None


class StatisticsSnapshot(BaseModel):
    """All statistics of a model for one filter set."""

    model: str
    filters: dict[str, Any]
    items: list[StatisticItem]
    computed_at: datetime

    def as_dict(self) -> dict[str, Any]:
        return {item.name: item.value for item in self.items}
