"""
Column-level operator implementations for SQLAlchemy.

Each ``WhereOperator`` maps to a function ``(column, value) -> clause``.
The registry is what :class:`SelectBuilder` uses to turn one builder
call into a ``ColumnElement[bool]``.
"""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any, cast

from ..exceptions import OperatorNotFoundError
from ..operators import WhereOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement

    ColumnOperator = Callable[[Any, Any], ColumnElement[bool]]


def _compare(fn: Callable[[Any, Any], Any]) -> ColumnOperator:
    def apply(column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", fn(column, value))

    return apply


def _like(column: Any, value: Any) -> ColumnElement[bool]:
    return cast("ColumnElement[bool]", column.like(value))


def _in(column: Any, values: Any) -> ColumnElement[bool]:
    return cast("ColumnElement[bool]", column.in_(list(values)))


def _not_in(column: Any, values: Any) -> ColumnElement[bool]:
    return cast("ColumnElement[bool]", column.not_in(list(values)))


def _between(column: Any, bounds: Any) -> ColumnElement[bool]:
    low, high = bounds
    return cast("ColumnElement[bool]", column.between(low, high))


def _not_between(column: Any, bounds: Any) -> ColumnElement[bool]:
    low, high = bounds
    return cast("ColumnElement[bool]", ~column.between(low, high))


def _is_null(column: Any, _value: Any) -> ColumnElement[bool]:
    return cast("ColumnElement[bool]", column.is_(None))


def _is_not_null(column: Any, _value: Any) -> ColumnElement[bool]:
    return cast("ColumnElement[bool]", column.is_not(None))


class ColumnOperatorRegistry:
    """Column operator functions keyed by :class:`WhereOperator`."""

    def __init__(self) -> None:
        self._operators: dict[WhereOperator, ColumnOperator] = {}

    def register(self, operator: WhereOperator, fn: ColumnOperator) -> None:
        self._operators[operator] = fn

    def unregister(self, operator: WhereOperator) -> None:
        self._operators.pop(operator, None)

    def get(self, operator: WhereOperator) -> ColumnOperator | None:
        return self._operators.get(operator)

    def has(self, operator: WhereOperator) -> bool:
        return operator in self._operators

    @property
    def supported_operators(self) -> set[WhereOperator]:
        return set(self._operators)

    def apply(
        self,
        operator: WhereOperator,
        column: Any,
        value: Any,
    ) -> ColumnElement[bool]:
        """
        Build the clause for *operator*.

        Raises:
            OperatorNotFoundError: If the operator is not registered.
        """
        fn = self.get(operator)
        if fn is None:
            raise OperatorNotFoundError(
                operator.value, sorted(op.value for op in self._operators)
            )
        return fn(column, value)


def build_default_column_registry() -> ColumnOperatorRegistry:
    """Create a registry with every built-in column operator."""
    registry = ColumnOperatorRegistry()
    registry.register(WhereOperator.EQ, _compare(op_module.eq))
    registry.register(WhereOperator.GT, _compare(op_module.gt))
    registry.register(WhereOperator.LT, _compare(op_module.lt))
    registry.register(WhereOperator.NE, _compare(op_module.ne))
    registry.register(WhereOperator.LIKE, _like)
    registry.register(WhereOperator.IN, _in)
    registry.register(WhereOperator.NOT_IN, _not_in)
    registry.register(WhereOperator.BETWEEN, _between)
    registry.register(WhereOperator.NOT_BETWEEN, _not_between)
    registry.register(WhereOperator.IS_NULL, _is_null)
    registry.register(WhereOperator.IS_NOT_NULL, _is_not_null)
    return registry


DEFAULT_COLUMN_REGISTRY: ColumnOperatorRegistry = build_default_column_registry()
