"""In-memory query builder that records predicates instead of running them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from ..operators import JoinMode, WhereOperator


def _literal(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return str(value)


@dataclass(frozen=True)
class Predicate:
    """One recorded builder call."""

    join: JoinMode
    field: str
    operator: WhereOperator
    value: Any = None

    def __str__(self) -> str:
        op = self.operator
        if op is WhereOperator.IS_NULL:
            return f"{self.field} IS NULL"
        if op is WhereOperator.IS_NOT_NULL:
            return f"{self.field} IS NOT NULL"
        if op in (WhereOperator.IN, WhereOperator.NOT_IN):
            keyword = "IN" if op is WhereOperator.IN else "NOT IN"
            items = ", ".join(_literal(v) for v in self.value)
            return f"{self.field} {keyword} ({items})"
        if op in (WhereOperator.BETWEEN, WhereOperator.NOT_BETWEEN):
            keyword = "BETWEEN" if op is WhereOperator.BETWEEN else "NOT BETWEEN"
            low, high = self.value
            return f"{self.field} {keyword} {_literal(low)} AND {_literal(high)}"
        return f"{self.field} {op.value.upper()} {_literal(self.value)}"


@dataclass(frozen=True)
class RecordingBuilder:
    """
    Immutable :class:`IQueryBuilder` that keeps every call as a
    :class:`Predicate`.

    Handy for inspecting what a condition map compiles to::

        >>> b = compile_where_map(RecordingBuilder(), {"age": 30, "id": ["in", [1, 2]]})
        >>> b.render()
        'age = 30 AND id IN (1, 2)'
    """

    predicates: tuple[Predicate, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.predicates)

    def render(self) -> str:
        """Join the recorded predicates into one SQL-like string."""
        parts: list[str] = []
        for index, predicate in enumerate(self.predicates):
            if index:
                parts.append(predicate.join.value.upper())
            parts.append(str(predicate))
        return " ".join(parts)

    def _add(
        self,
        join: JoinMode,
        field: str,
        operator: WhereOperator,
        value: Any = None,
    ) -> RecordingBuilder:
        predicate = Predicate(join, field, operator, value)
        return replace(self, predicates=(*self.predicates, predicate))

    def where(self, field: str, op: str, value: Any) -> RecordingBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.parse(op), value)

    def or_where(self, field: str, op: str, value: Any) -> RecordingBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.parse(op), value)

    def where_in(self, field: str, values: Sequence[Any]) -> RecordingBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.IN, tuple(values))

    def or_where_in(self, field: str, values: Sequence[Any]) -> RecordingBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.IN, tuple(values))

    def where_not_in(self, field: str, values: Sequence[Any]) -> RecordingBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.NOT_IN, tuple(values))

    def or_where_not_in(self, field: str, values: Sequence[Any]) -> RecordingBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.NOT_IN, tuple(values))

    def where_between(self, field: str, bounds: Sequence[Any]) -> RecordingBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.BETWEEN, tuple(bounds))

    def or_where_between(self, field: str, bounds: Sequence[Any]) -> RecordingBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.BETWEEN, tuple(bounds))

    def where_not_between(
        self, field: str, bounds: Sequence[Any]
    ) -> RecordingBuilder:
        return self._add(
            JoinMode.AND, field, WhereOperator.NOT_BETWEEN, tuple(bounds)
        )

    def or_where_not_between(
        self, field: str, bounds: Sequence[Any]
    ) -> RecordingBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.NOT_BETWEEN, tuple(bounds))

    def where_null(self, field: str) -> RecordingBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.IS_NULL)

    def or_where_null(self, field: str) -> RecordingBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.IS_NULL)

    def where_not_null(self, field: str) -> RecordingBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.IS_NOT_NULL)

    def or_where_not_null(self, field: str) -> RecordingBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.IS_NOT_NULL)
