"""Null-check predicates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..operators import JoinMode, WhereOperator
from ..strategy import PredicateStrategy

if TYPE_CHECKING:
    from ..ports.builder import B


class NullPredicate(PredicateStrategy):
    @property
    def operator(self) -> WhereOperator:
        return WhereOperator.IS_NULL

    def apply(self, builder: B, field: str, _operand: Any, join: JoinMode) -> B:
        if join is JoinMode.OR:
            return builder.or_where_null(field)
        return builder.where_null(field)


class NotNullPredicate(PredicateStrategy):
    @property
    def operator(self) -> WhereOperator:
        return WhereOperator.IS_NOT_NULL

    def apply(self, builder: B, field: str, _operand: Any, join: JoinMode) -> B:
        if join is JoinMode.OR:
            return builder.or_where_not_null(field)
        return builder.where_not_null(field)
