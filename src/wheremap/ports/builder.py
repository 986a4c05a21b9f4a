"""IQueryBuilder: the predicate-builder capability the compiler targets."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

B = TypeVar("B", bound="IQueryBuilder")


@runtime_checkable
class IQueryBuilder(Protocol):
    """
    Anything that accumulates filter predicates.

    Every method returns a builder. Immutable implementations return a
    new value, mutable ones may return ``self``; callers always continue
    with the returned object::

        builder = builder.where("age", ">", 18)
        builder = builder.or_where_in("status", ["new", "open"])

    ``where*`` methods join with AND, ``or_where*`` methods with OR.
    """

    def where(self: B, field: str, op: str, value: Any) -> B: ...

    def or_where(self: B, field: str, op: str, value: Any) -> B: ...

    def where_in(self: B, field: str, values: Sequence[Any]) -> B: ...

    def or_where_in(self: B, field: str, values: Sequence[Any]) -> B: ...

    def where_not_in(self: B, field: str, values: Sequence[Any]) -> B: ...

    def or_where_not_in(self: B, field: str, values: Sequence[Any]) -> B: ...

    def where_between(self: B, field: str, bounds: Sequence[Any]) -> B: ...

    def or_where_between(self: B, field: str, bounds: Sequence[Any]) -> B: ...

    def where_not_between(self: B, field: str, bounds: Sequence[Any]) -> B: ...

    def or_where_not_between(self: B, field: str, bounds: Sequence[Any]) -> B: ...

    def where_null(self: B, field: str) -> B: ...

    def or_where_null(self: B, field: str) -> B: ...

    def where_not_null(self: B, field: str) -> B: ...

    def or_where_not_null(self: B, field: str) -> B: ...
