"""
Predicate strategies.

Each ``WhereOperator`` is applied to a builder by one
``PredicateStrategy``. Strategies live in a ``PredicateRegistry`` so a
caller can swap the handling of a single operator without touching the
compiler.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .exceptions import OperatorNotFoundError

if TYPE_CHECKING:
    from .operators import JoinMode, WhereOperator
    from .ports.builder import B


class PredicateStrategy(ABC):
    """Applies one operator to a query builder."""

    @property
    @abstractmethod
    def operator(self) -> WhereOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, builder: B, field: str, operand: Any, join: JoinMode) -> B:
        """
        Add the predicate to *builder*.

        Args:
            builder: The query builder to extend.
            field: Field (column) name.
            operand: Normalised operand, shaped for ``self.operator``.
            join: Selects the ``where*`` or ``or_where*`` family.

        Returns:
            The builder returned by the underlying builder call.
        """
        ...


class PredicateRegistry:
    """``PredicateStrategy`` instances keyed by ``WhereOperator``."""

    def __init__(self) -> None:
        self._strategies: dict[WhereOperator, PredicateStrategy] = {}

    def register(self, strategy: PredicateStrategy) -> None:
        self._strategies[strategy.operator] = strategy

    def register_all(self, *strategies: PredicateStrategy) -> None:
        for strategy in strategies:
            self.register(strategy)

    def unregister(self, operator: WhereOperator) -> None:
        self._strategies.pop(operator, None)

    def get(self, operator: WhereOperator) -> PredicateStrategy | None:
        return self._strategies.get(operator)

    def has(self, operator: WhereOperator) -> bool:
        return operator in self._strategies

    @property
    def supported_operators(self) -> set[WhereOperator]:
        return set(self._strategies)

    def copy(self) -> PredicateRegistry:
        clone = PredicateRegistry()
        clone._strategies = dict(self._strategies)
        return clone

    def apply(
        self,
        operator: WhereOperator,
        builder: B,
        field: str,
        operand: Any,
        join: JoinMode,
    ) -> B:
        """
        Look up the strategy for *operator* and apply it.

        Raises:
            OperatorNotFoundError: If no strategy is registered.
        """
        strategy = self.get(operator)
        if strategy is None:
            raise OperatorNotFoundError(
                operator.value,
                sorted(op.value for op in self._strategies),
                path=field,
            )
        return strategy.apply(builder, field, operand, join)
