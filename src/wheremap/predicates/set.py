"""Membership and range predicates: in, notin, between, notbetween."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..operators import JoinMode, WhereOperator
from ..strategy import PredicateStrategy

if TYPE_CHECKING:
    from ..ports.builder import B


class InPredicate(PredicateStrategy):
    @property
    def operator(self) -> WhereOperator:
        return WhereOperator.IN

    def apply(self, builder: B, field: str, operand: Any, join: JoinMode) -> B:
        if join is JoinMode.OR:
            return builder.or_where_in(field, operand)
        return builder.where_in(field, operand)


class NotInPredicate(PredicateStrategy):
    @property
    def operator(self) -> WhereOperator:
        return WhereOperator.NOT_IN

    def apply(self, builder: B, field: str, operand: Any, join: JoinMode) -> B:
        if join is JoinMode.OR:
            return builder.or_where_not_in(field, operand)
        return builder.where_not_in(field, operand)


class BetweenPredicate(PredicateStrategy):
    @property
    def operator(self) -> WhereOperator:
        return WhereOperator.BETWEEN

    def apply(self, builder: B, field: str, operand: Any, join: JoinMode) -> B:
        if join is JoinMode.OR:
            return builder.or_where_between(field, operand)
        return builder.where_between(field, operand)


class NotBetweenPredicate(PredicateStrategy):
    @property
    def operator(self) -> WhereOperator:
        return WhereOperator.NOT_BETWEEN

    def apply(self, builder: B, field: str, operand: Any, join: JoinMode) -> B:
        if join is JoinMode.OR:
            return builder.or_where_not_between(field, operand)
        return builder.where_not_between(field, operand)
