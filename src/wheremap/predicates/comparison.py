"""Comparison predicates: =, >, <, <> and like."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..operators import JoinMode, WhereOperator
from ..strategy import PredicateStrategy

if TYPE_CHECKING:
    from ..ports.builder import B


class ComparisonPredicate(PredicateStrategy):
    """Calls ``where(field, token, value)`` with the operator's own token."""

    def __init__(self, operator: WhereOperator) -> None:
        self._operator = operator

    @property
    def operator(self) -> WhereOperator:
        return self._operator

    def apply(self, builder: B, field: str, operand: Any, join: JoinMode) -> B:
        token = self._operator.value
        if join is JoinMode.OR:
            return builder.or_where(field, token, operand)
        return builder.where(field, token, operand)


def comparison_predicates() -> tuple[ComparisonPredicate, ...]:
    return tuple(
        ComparisonPredicate(op)
        for op in (
            WhereOperator.EQ,
            WhereOperator.GT,
            WhereOperator.LT,
            WhereOperator.NE,
            WhereOperator.LIKE,
        )
    )
