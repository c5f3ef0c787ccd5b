"""Fluent, parameterized query builder for Cosmos DB SQL.

    >>> sql, params = (
    ...     ItemQuery()
    ...     .where("stockLevel", ">=", 70)
    ...     .select("id", "name", "stockLevel")
    ...     .build()
    ... )
    >>> sql
    'SELECT c.id, c.name, c.stockLevel FROM c WHERE c.stockLevel >= @p0'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any

from cosmos_demos.database.paging import Query

COMPARISON_OPERATORS = frozenset({"=", "!=", "<", "<=", ">", ">="})
FUNCTION_OPERATORS = frozenset({"STARTSWITH", "CONTAINS", "ARRAY_CONTAINS"})

_FIELD_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def _check_field(field: str) -> str:
    if not _FIELD_PATTERN.match(field):
        raise ValueError(f"Invalid field name: {field!r}")
    return field


@dataclass(frozen=True)
class _Condition:
    field: str
    operator: str
    value: Any


@dataclass(frozen=True)
class ItemQuery:
    """An immutable query; every method returns a new instance."""

    alias: str = "c"
    conditions: tuple[_Condition, ...] = ()
    fields: tuple[str, ...] = ()
    ordering: tuple[str, bool] | None = None
    top: int | None = None

    def where(self, field: str, operator: str, value: Any) -> ItemQuery:
        op = operator.upper()
        if op not in COMPARISON_OPERATORS and op not in FUNCTION_OPERATORS:
            raise ValueError(f"Unsupported operator: {operator!r}")
        condition = _Condition(_check_field(field), op, value)
        return replace(self, conditions=(*self.conditions, condition))

    def select(self, *fields: str) -> ItemQuery:
        return replace(self, fields=tuple(_check_field(f) for f in fields))

    def order_by(self, field: str, *, descending: bool = False) -> ItemQuery:
        return replace(self, ordering=(_check_field(field), descending))

    def limit(self, count: int) -> ItemQuery:
        if count < 1:
            raise ValueError(f"limit must be a positive integer, got {count}")
        return replace(self, top=count)

    def build(self) -> tuple[str, list[dict[str, Any]]]:
        """Render the SQL text and its ``@pN`` parameters."""
        a = self.alias
        parts = ["SELECT"]
        if self.top is not None:
            parts.append(f"TOP {self.top}")
        parts.append(", ".join(f"{a}.{f}" for f in self.fields) if self.fields else "*")
        parts.append(f"FROM {a}")

        parameters: list[dict[str, Any]] = []
        clauses: list[str] = []
        for index, condition in enumerate(self.conditions):
            name = f"@p{index}"
            parameters.append({"name": name, "value": condition.value})
            if condition.operator in FUNCTION_OPERATORS:
                clauses.append(f"{condition.operator}({a}.{condition.field}, {name})")
            else:
                clauses.append(f"{a}.{condition.field} {condition.operator} {name}")
        if clauses:
            parts.append("WHERE " + " AND ".join(clauses))

        if self.ordering is not None:
            field, descending = self.ordering
            parts.append(f"ORDER BY {a}.{field} {'DESC' if descending else 'ASC'}")

        return " ".join(parts), parameters

    def to_query(
        self,
        database_id: str,
        container_id: str,
        partition_key: str | None = None,
    ) -> Query:
        sql, parameters = self.build()
        return Query(
            text=sql,
            database_id=database_id,
            container_id=container_id,
            partition_key=partition_key,
            parameters=tuple(parameters),
        )
