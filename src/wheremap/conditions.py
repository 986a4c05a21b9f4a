"""
Structured condition types and the loose condition-map parser.

A *condition map* is what callers write by hand::

    {
        "id": ["in", [1, 2, 3]],
        "category_id": ["<>", 9],
        "tag_id": 10,
        "_logic": "or",
    }

``WhereMap.from_mapping`` turns it into a ``WhereMap``: an ordered tuple
of ``Condition`` values plus a separate ``join`` field. The compiler
only ever sees the structured form.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .exceptions import (
    OperandShapeError,
    OperatorNotFoundError,
    ValidationError,
)
from .operators import JoinMode, OperandShape, WhereOperator

logger = logging.getLogger("wheremap.conditions")

LOGIC_KEY = "_logic"

_COLLECTION_TYPES = (list, tuple, set, frozenset)


def _normalise_sequence(values: Any) -> tuple[Any, ...]:
    if isinstance(values, set | frozenset):
        try:
            return tuple(sorted(values))
        except TypeError:
            return tuple(values)
    return tuple(values)


@dataclass(frozen=True)
class Condition:
    """
    One field-level predicate.

    The operand is normalised on construction: sequences become tuples,
    ranges become 2-tuples and null checks drop their operand.
    """

    field: str
    operator: WhereOperator
    operand: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or not self.field:
            raise ValidationError(
                f"Field name must be a non-empty string, got {self.field!r}",
                path=str(self.field),
            )
        op = WhereOperator.parse(self.operator, path=self.field)
        object.__setattr__(self, "operator", op)
        object.__setattr__(self, "operand", self._check_operand(op, self.operand))

    def _check_operand(self, op: WhereOperator, operand: Any) -> Any:
        shape = op.shape
        if shape is OperandShape.NONE:
            return None
        if shape is OperandShape.SCALAR:
            if isinstance(operand, _COLLECTION_TYPES + (dict,)):
                raise OperandShapeError(self.field, op.value, shape.value, operand)
            return operand
        if not isinstance(operand, _COLLECTION_TYPES):
            raise OperandShapeError(self.field, op.value, shape.value, operand)
        values = _normalise_sequence(operand)
        if shape is OperandShape.RANGE and len(values) != 2:
            raise OperandShapeError(self.field, op.value, shape.value, operand)
        return values

    def to_value(self) -> Any:
        """Render the loose condition-map value for this condition."""
        if self.operator is WhereOperator.EQ:
            return self.operand
        if self.operator.shape is OperandShape.NONE:
            return [self.operator.value]
        if isinstance(self.operand, tuple):
            return [self.operator.value, list(self.operand)]
        return [self.operator.value, self.operand]


@dataclass(frozen=True)
class WhereMap:
    """
    An ordered set of conditions and the mode joining them.

    The join mode applies to the whole map. Mixed AND/OR logic is not
    expressible here and has to be composed by the caller.
    """

    conditions: tuple[Condition, ...] = field(default_factory=tuple)
    join: JoinMode = JoinMode.AND

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", tuple(self.conditions))
        object.__setattr__(self, "join", JoinMode.parse(self.join))

    def __len__(self) -> int:
        return len(self.conditions)

    def __bool__(self) -> bool:
        return bool(self.conditions)

    def __iter__(self) -> Iterator[Condition]:
        return iter(self.conditions)

    # -- construction ---------------------------------------------------------

    def with_condition(
        self,
        field: str,
        operator: WhereOperator | str = WhereOperator.EQ,
        operand: Any = None,
    ) -> WhereMap:
        """Return a copy with one more condition appended."""
        condition = Condition(field, WhereOperator.parse(operator, path=field), operand)
        return replace(self, conditions=(*self.conditions, condition))

    def with_join(self, join: JoinMode | str) -> WhereMap:
        return replace(self, join=JoinMode.parse(join))

    @classmethod
    def of(
        cls,
        conditions: WhereMap | Mapping[str, Any] | None,
        *,
        strict: bool = True,
    ) -> WhereMap:
        """Coerce a ``WhereMap``, a condition map or ``None``."""
        if conditions is None:
            return cls()
        if isinstance(conditions, WhereMap):
            return conditions
        return cls.from_mapping(conditions, strict=strict)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> WhereMap:
        """
        Parse a loose condition map.

        Parameters
        ----------
        mapping:
            Field name to condition value. ``_logic`` selects the join
            mode and is never treated as a field. The mapping is not
            modified.
        strict:
            When ``True`` (default) an unknown operator raises
            :class:`OperatorNotFoundError` and a bad ``_logic`` value
            raises :class:`ValidationError`. When ``False`` unknown
            operators are skipped with a warning and a bad ``_logic``
            value means AND.
        """
        if not isinstance(mapping, Mapping):
            raise ValidationError(
                f"Expected a mapping, got {type(mapping).__name__}", path="<root>"
            )

        join = JoinMode.AND
        conditions: list[Condition] = []
        for key, value in mapping.items():
            if key == LOGIC_KEY:
                join = JoinMode.parse(value, strict=strict)
                continue
            condition = cls._parse_entry(key, value, strict=strict)
            if condition is not None:
                conditions.append(condition)
        return cls(tuple(conditions), join)

    @classmethod
    def from_json(cls, text: str, *, strict: bool = True) -> WhereMap:
        """Parse a JSON object holding a condition map."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON: {exc}", path="<root>") from exc
        if not isinstance(data, dict):
            raise ValidationError(
                "Top-level JSON value must be an object", path="<root>"
            )
        return cls.from_mapping(data, strict=strict)

    @classmethod
    def validate(cls, mapping: Any) -> list[str]:
        """
        Check a condition map without raising.

        Returns one message per problem, or an empty list when the map
        would parse in strict mode.
        """
        if not isinstance(mapping, Mapping):
            return [f"<root>: expected a mapping, got {type(mapping).__name__}"]

        errors: list[str] = []
        for key, value in mapping.items():
            try:
                if key == LOGIC_KEY:
                    JoinMode.parse(value, strict=True)
                else:
                    cls._parse_entry(key, value, strict=True)
            except ValidationError as exc:
                errors.append(f"{exc.path or key}: {exc.message}")
        return errors

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Render back to the loose condition-map form."""
        data: dict[str, Any] = {c.field: c.to_value() for c in self.conditions}
        if self.join is JoinMode.OR:
            data[LOGIC_KEY] = JoinMode.OR.value
        return data

    # -- internals ------------------------------------------------------------

    @staticmethod
    def _parse_entry(key: Any, value: Any, *, strict: bool) -> Condition | None:
        if not isinstance(key, str) or not key:
            raise ValidationError(
                f"Field name must be a non-empty string, got {key!r}", path=str(key)
            )

        if not isinstance(value, list | tuple):
            return Condition(key, WhereOperator.EQ, value)

        if not value:
            if strict:
                raise ValidationError(
                    "Tagged condition must name an operator", path=key
                )
            logger.warning("Skipping '%s': tagged condition has no operator", key)
            return None
        if len(value) > 2:
            if strict:
                raise ValidationError(
                    "Tagged condition takes [operator, operand], "
                    f"got {len(value)} items",
                    path=key,
                )
            logger.warning("Ignoring %d trailing item(s) on '%s'", len(value) - 2, key)

        token = value[0]
        operand = value[1] if len(value) > 1 else None
        try:
            operator = WhereOperator.parse(token, path=key)
        except OperatorNotFoundError:
            if strict:
                raise
            logger.warning("Skipping '%s': unknown operator %r", key, token)
            return None
        return Condition(key, operator, operand)
