"""
Compile a condition map into predicate calls on a query builder.

The compiler walks a :class:`WhereMap` in order and hands each
condition to the :class:`PredicateStrategy` registered for its
operator. The join mode is chosen once per map: every predicate is
added through the ``where*`` family for AND or the ``or_where*``
family for OR.

Loose condition maps (plain dicts with an optional ``_logic`` key) are
parsed first, see :meth:`WhereMap.from_mapping`.

Strictness
----------
By default an unknown operator token is an error. A compiler built with
``strict=False`` skips such conditions and logs a warning instead, which
matches the permissive behaviour of hand-written where-map helpers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .conditions import WhereMap
from .exceptions import EmptyConditionError, OperatorNotFoundError
from .predicates import DEFAULT_PREDICATE_REGISTRY

if TYPE_CHECKING:
    from .ports.builder import B
    from .strategy import PredicateRegistry

logger = logging.getLogger("wheremap.compiler")

ConditionsLike = WhereMap | Mapping[str, Any] | None


class ConditionCompiler:
    """
    Applies a condition map to any :class:`IQueryBuilder`.

    Parameters
    ----------
    registry:
        Strategy registry. Falls back to ``DEFAULT_PREDICATE_REGISTRY``.
    strict:
        Raise on unknown operators (default) or skip them.
    """

    def __init__(
        self,
        registry: PredicateRegistry | None = None,
        *,
        strict: bool = True,
    ) -> None:
        self._registry = registry or DEFAULT_PREDICATE_REGISTRY
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def parse(self, conditions: ConditionsLike) -> WhereMap:
        """Coerce *conditions* with this compiler's strictness."""
        return WhereMap.of(conditions, strict=self._strict)

    def compile(self, builder: B, conditions: ConditionsLike) -> B:
        """
        Apply every condition to *builder* and return the result.

        An empty map returns *builder* untouched.
        """
        where_map = self.parse(conditions)
        if not where_map:
            return builder

        for condition in where_map:
            try:
                builder = self._registry.apply(
                    condition.operator,
                    builder,
                    condition.field,
                    condition.operand,
                    where_map.join,
                )
            except OperatorNotFoundError:
                if self._strict:
                    raise
                logger.warning(
                    "No predicate strategy for '%s' on '%s'; skipped",
                    condition.operator.value,
                    condition.field,
                )

        logger.debug(
            "Compiled %d condition(s) joined by %s",
            len(where_map),
            where_map.join.value.upper(),
        )
        return builder


def require_conditions(
    conditions: ConditionsLike,
    operation: str | None = None,
    *,
    strict: bool = True,
) -> WhereMap:
    """
    Coerce *conditions* and refuse an empty map.

    Mutating paths call this so an empty filter never reaches a
    statement that would otherwise touch every row.

    Raises:
        EmptyConditionError: If the map is empty (or only holds ``_logic``).
    """
    where_map = WhereMap.of(conditions, strict=strict)
    if not where_map:
        raise EmptyConditionError(operation)
    return where_map


_DEFAULT_COMPILER = ConditionCompiler()
_LENIENT_COMPILER = ConditionCompiler(strict=False)


def compile_where_map(builder: B, conditions: ConditionsLike, *, strict: bool = True) -> B:
    """Compile with the default registry."""
    compiler = _DEFAULT_COMPILER if strict else _LENIENT_COMPILER
    return compiler.compile(builder, conditions)
