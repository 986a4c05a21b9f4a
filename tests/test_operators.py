"""Tests for WhereOperator / JoinMode parsing."""

from __future__ import annotations

import pytest

from wheremap.exceptions import OperatorNotFoundError, ValidationError
from wheremap.operators import JoinMode, OperandShape, WhereOperator


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("=", WhereOperator.EQ),
        ("eq", WhereOperator.EQ),
        (">", WhereOperator.GT),
        ("<", WhereOperator.LT),
        ("<>", WhereOperator.NE),
        ("!=", WhereOperator.NE),
        ("neq", WhereOperator.NE),
        ("LIKE", WhereOperator.LIKE),
        ("In", WhereOperator.IN),
        ("notin", WhereOperator.NOT_IN),
        ("not_in", WhereOperator.NOT_IN),
        ("between", WhereOperator.BETWEEN),
        ("NotBetween", WhereOperator.NOT_BETWEEN),
        ("null", WhereOperator.IS_NULL),
        (" notnull ", WhereOperator.IS_NOT_NULL),
        ("is_not_null", WhereOperator.IS_NOT_NULL),
    ],
)
def test_parse_accepts_canonical_tokens_and_aliases(
    token: str, expected: WhereOperator
) -> None:
    assert WhereOperator.parse(token) is expected


def test_parse_passes_members_through() -> None:
    assert WhereOperator.parse(WhereOperator.IN) is WhereOperator.IN


def test_parse_unknown_token_suggests_close_match() -> None:
    with pytest.raises(OperatorNotFoundError) as exc_info:
        WhereOperator.parse("betwen", path="created")

    err = exc_info.value
    assert err.operator == "betwen"
    assert "between" in err.suggestions
    assert err.path == "created"


def test_parse_non_string_token_is_rejected() -> None:
    with pytest.raises(OperatorNotFoundError):
        WhereOperator.parse(42)  # type: ignore[arg-type]


def test_every_operator_has_a_shape() -> None:
    assert WhereOperator.IN.shape is OperandShape.SEQUENCE
    assert WhereOperator.BETWEEN.shape is OperandShape.RANGE
    assert WhereOperator.IS_NULL.shape is OperandShape.NONE
    assert WhereOperator.LIKE.shape is OperandShape.SCALAR
    assert all(isinstance(op.shape, OperandShape) for op in WhereOperator)


def test_tokens_lists_aliases() -> None:
    tokens = WhereOperator.tokens()
    assert "notbetween" in tokens
    assert "not-between" in tokens
    assert tokens == sorted(tokens)


class TestJoinMode:
    @pytest.mark.parametrize("value", ["or", "OR", " Or "])
    def test_or_in_any_case(self, value: str) -> None:
        assert JoinMode.parse(value) is JoinMode.OR

    def test_and(self) -> None:
        assert JoinMode.parse("and") is JoinMode.AND

    def test_strict_rejects_garbage(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            JoinMode.parse("xor")
        assert exc_info.value.path == "_logic"

    def test_lenient_treats_garbage_as_and(self) -> None:
        assert JoinMode.parse("xor", strict=False) is JoinMode.AND
