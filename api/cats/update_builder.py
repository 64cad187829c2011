"""
Dynamic SET-clause construction for partial updates.

Column names only ever come from the whitelist; every value is bound as a
positional parameter. Values that need more than one parameter (e.g. a
point) implement `placeholder(index)` and `params()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Mapping, Protocol, runtime_checkable

from core.errors import InvalidInputError


@runtime_checkable
class BoundExpression(Protocol):
    def placeholder(self, index: int) -> str: ...

    def params(self) -> tuple[Any, ...]: ...


@dataclass
class SetClause:
    assignments: list[tuple[str, str]] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)
    first_index: int = 1

    @property
    def next_index(self) -> int:
        return self.first_index + len(self.params)

    @property
    def columns(self) -> list[str]:
        return [column for column, _ in self.assignments]

    def sql(self) -> str:
        return ", ".join(f"{column} = {placeholder}" for column, placeholder in self.assignments)


def check_field_names(fields: Mapping[str, Any], allowed: Collection[str]) -> None:
    """Reject an empty update or any key outside `allowed`."""
    if not fields:
        raise InvalidInputError("No fields to update")

    unknown = [key for key in fields if key not in allowed]
    if unknown:
        raise InvalidInputError(f"Unknown fields: {', '.join(sorted(unknown))}")


def build_set_clause(
    fields: Mapping[str, Any],
    allowed: Mapping[str, str],
    *,
    first_index: int = 1,
) -> SetClause:
    """
    Build `(column, placeholder)` pairs and the parallel parameter list.

    `allowed` maps accepted field names to column names. Fields are taken in
    the caller's iteration order.
    """
    check_field_names(fields, allowed)

    clause = SetClause(first_index=first_index)
    for key, value in fields.items():
        column = allowed[key]
        if isinstance(value, BoundExpression):
            clause.assignments.append((column, value.placeholder(clause.next_index)))
            clause.params.extend(value.params())
        else:
            clause.assignments.append((column, f"${clause.next_index}"))
            clause.params.append(value)
    return clause
