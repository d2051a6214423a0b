"""Query builder over DuckDB - scopes, predicates, joins and aggregates."""

from dataclasses import dataclass, replace
from typing import Any

import polars as pl
from loguru import logger

from statkit.errors import UnknownScopeError
from statkit.models import ALL, SQL_FUNCTIONS, Operation, Predicate, TableModel, quote_ident
from statkit.repositories.base import BaseRepository


@dataclass(frozen=True, eq=False)
class StatQuery:
    """Unexecuted, filtered collection of one model's rows.

    Every builder method returns a new query; predicates are ANDed.
    """

    engine: "QueryEngine"
    model: TableModel
    predicates: tuple[Predicate, ...] = ()
    joins: tuple[str, ...] = ()

    @property
    def table(self) -> str:
        return self.model.table

    @property
    def params(self) -> list:
        return [p for predicate in self.predicates for p in predicate.params]

    def where(self, *conditions: Any) -> "StatQuery":
        """Add predicates: Predicate objects, raw SQL strings or column mappings."""
        added = tuple(p for c in conditions for p in Predicate.from_value(c))
        if not added:
            return self
        return replace(self, predicates=self.predicates + added)

    def join(self, *clauses: Any) -> "StatQuery":
        added = []
        for clause in clauses:
            if clause is None:
                continue
            if isinstance(clause, (list, tuple)):
                added.extend(c for c in clause if c)
            else:
                added.append(clause)
        if not added:
            return self
        return replace(self, joins=self.joins + tuple(added))

    def scope(self, name: str) -> "StatQuery":
        """Apply a named scope declared on the model."""
        if name == ALL:
            return self
        if name not in self.model.scopes:
            raise UnknownScopeError(self.model.name, name)
        scope = self.model.scopes[name]
        if callable(scope):
            return scope(self)
        return self.where(scope)

    def to_sql(self, select: str | None = None) -> str:
        select = select or f"{quote_ident(self.table)}.*"
        sql = f"SELECT {select} FROM {quote_ident(self.table)}"
        for clause in self.joins:
            sql += f" {clause}"
        if self.predicates:
            sql += " WHERE " + " AND ".join(f"({p.sql})" for p in self.predicates)
        return sql

    def column(self, name: str) -> str:
        """Quoted column reference; bare names belong to the model's table."""
        if name == "*" or "." in name:
            return quote_ident(name)
        return quote_ident(f"{self.table}.{name}")

    def aggregate(self, operation: Operation | str, column: str = "id") -> Any:
        """Execute one aggregate over `column`. SUM over no rows is 0."""
        operation = Operation(operation)
        expr = f"{SQL_FUNCTIONS[operation]}({self.column(column)})"
        if operation is Operation.SUM:
            expr = f"COALESCE({expr}, 0)"
        row = self.engine.fetchone(self.to_sql(expr), self.params)
        return row[0] if row else None

    def count(self) -> int:
        return self.aggregate(Operation.COUNT, "*")

    def records(self) -> list[dict[str, Any]]:
        """Matching rows as dicts."""
        cursor = self.engine.execute(self.to_sql(), self.params)
        columns = [d[0] for d in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def frame(self) -> pl.DataFrame:
        """Matching rows as a polars DataFrame."""
        cursor = self.engine.execute(self.to_sql(), self.params)
        columns = [d[0] for d in cursor.description]
        return pl.DataFrame(cursor.fetchall(), schema=columns, orient="row")


class QueryEngine(BaseRepository):
    """Builds and runs statistic queries against DuckDB."""

    def base(self, model: TableModel) -> StatQuery:
        """Unscoped collection of all rows of `model`."""
        return StatQuery(engine=self, model=model)

    def execute(self, query: str, params: list | tuple | None = None) -> Any:
        logger.trace("SQL: {} {}", query, params)
        return super().execute(query, params)
