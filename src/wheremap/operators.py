"""Operator and join-mode enumerations for condition maps."""

from __future__ import annotations

from enum import Enum

from .exceptions import OperatorNotFoundError, ValidationError


class OperandShape(Enum):
    """What an operator expects as its operand."""

    SCALAR = "a scalar value"
    SEQUENCE = "a list, tuple or set of values"
    RANGE = "a two-item range"
    NONE = "no operand"


class WhereOperator(str, Enum):
    """Supported where-map operators, valued by their canonical token."""

    EQ = "="
    GT = ">"
    LT = "<"
    NE = "<>"
    LIKE = "like"
    IN = "in"
    NOT_IN = "notin"
    BETWEEN = "between"
    NOT_BETWEEN = "notbetween"
    IS_NULL = "null"
    IS_NOT_NULL = "notnull"

    @property
    def shape(self) -> OperandShape:
        return _SHAPES[self]

    @classmethod
    def parse(cls, token: str, *, path: str | None = None) -> WhereOperator:
        """
        Resolve a token (canonical or alias, any case) to an operator.

        Raises:
            OperatorNotFoundError: If the token is not recognised.
        """
        if isinstance(token, WhereOperator):
            return token
        if not isinstance(token, str):
            raise OperatorNotFoundError(repr(token), sorted(_ALIASES), path=path)
        key = token.strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise OperatorNotFoundError(key, sorted(_ALIASES), path=path) from None

    @classmethod
    def tokens(cls) -> list[str]:
        """Every accepted token, canonical and alias."""
        return sorted(_ALIASES)


class JoinMode(str, Enum):
    """How predicates of one map are combined."""

    AND = "and"
    OR = "or"

    @classmethod
    def parse(cls, value: str | JoinMode, *, strict: bool = True) -> JoinMode:
        """
        Resolve a ``_logic`` value.

        In lenient mode anything other than ``or`` means AND.
        """
        if isinstance(value, JoinMode):
            return value
        normalised = str(value).strip().lower()
        if normalised == cls.OR.value:
            return cls.OR
        if normalised == cls.AND.value or not strict:
            return cls.AND
        raise ValidationError(
            f"'_logic' must be 'and' or 'or', got {value!r}", path="_logic"
        )


_SHAPES: dict[WhereOperator, OperandShape] = {
    WhereOperator.EQ: OperandShape.SCALAR,
    WhereOperator.GT: OperandShape.SCALAR,
    WhereOperator.LT: OperandShape.SCALAR,
    WhereOperator.NE: OperandShape.SCALAR,
    WhereOperator.LIKE: OperandShape.SCALAR,
    WhereOperator.IN: OperandShape.SEQUENCE,
    WhereOperator.NOT_IN: OperandShape.SEQUENCE,
    WhereOperator.BETWEEN: OperandShape.RANGE,
    WhereOperator.NOT_BETWEEN: OperandShape.RANGE,
    WhereOperator.IS_NULL: OperandShape.NONE,
    WhereOperator.IS_NOT_NULL: OperandShape.NONE,
}

# Canonical tokens plus the spelled-out names callers tend to use
_ALIASES: dict[str, WhereOperator] = {
    **{member.value: member for member in WhereOperator},
    "eq": WhereOperator.EQ,
    "gt": WhereOperator.GT,
    "lt": WhereOperator.LT,
    "neq": WhereOperator.NE,
    "ne": WhereOperator.NE,
    "!=": WhereOperator.NE,
    "not-in": WhereOperator.NOT_IN,
    "not_in": WhereOperator.NOT_IN,
    "not-between": WhereOperator.NOT_BETWEEN,
    "not_between": WhereOperator.NOT_BETWEEN,
    "is-null": WhereOperator.IS_NULL,
    "is_null": WhereOperator.IS_NULL,
    "is-not-null": WhereOperator.IS_NOT_NULL,
    "is_not_null": WhereOperator.IS_NOT_NULL,
    "not_null": WhereOperator.IS_NOT_NULL,
}
