"""Tests for Condition / WhereMap parsing and serialisation."""

from __future__ import annotations

import logging

import pytest

from wheremap.conditions import LOGIC_KEY, Condition, WhereMap
from wheremap.exceptions import (
    OperandShapeError,
    OperatorNotFoundError,
    ValidationError,
)
from wheremap.operators import JoinMode, WhereOperator

# ---------------------------------------------------------------------------
# Condition
# ---------------------------------------------------------------------------


def test_condition_normalises_sequence_operand() -> None:
    cond = Condition("id", WhereOperator.IN, [3, 1, 2])
    assert cond.operand == (3, 1, 2)


def test_condition_sorts_set_operand() -> None:
    cond = Condition("id", WhereOperator.IN, {3, 1, 2})
    assert cond.operand == (1, 2, 3)


def test_condition_parses_operator_token() -> None:
    cond = Condition("age", ">", 30)  # type: ignore[arg-type]
    assert cond.operator is WhereOperator.GT


def test_condition_null_drops_operand() -> None:
    assert Condition("x", WhereOperator.IS_NULL, "ignored").operand is None


@pytest.mark.parametrize(
    ("operator", "operand"),
    [
        (WhereOperator.IN, 5),
        (WhereOperator.BETWEEN, [1, 2, 3]),
        (WhereOperator.NOT_BETWEEN, "ab"),
        (WhereOperator.EQ, [1, 2]),
        (WhereOperator.LIKE, {"a": 1}),
    ],
)
def test_condition_rejects_bad_operand_shape(
    operator: WhereOperator, operand: object
) -> None:
    with pytest.raises(OperandShapeError) as exc_info:
        Condition("f", operator, operand)
    assert exc_info.value.field == "f"


def test_condition_rejects_empty_field() -> None:
    with pytest.raises(ValidationError):
        Condition("", WhereOperator.EQ, 1)


# ---------------------------------------------------------------------------
# WhereMap.from_mapping
# ---------------------------------------------------------------------------


def test_scalar_value_means_equality() -> None:
    where_map = WhereMap.from_mapping({"age": 30})
    assert list(where_map) == [Condition("age", WhereOperator.EQ, 30)]
    assert where_map.join is JoinMode.AND


def test_tagged_pairs_keep_insertion_order() -> None:
    where_map = WhereMap.from_mapping(
        {
            "id": ["in", [1, 2, 3]],
            "category_id": ["<>", 9],
            "deleted_at": ["null"],
        }
    )
    assert [c.field for c in where_map] == ["id", "category_id", "deleted_at"]
    assert [c.operator for c in where_map] == [
        WhereOperator.IN,
        WhereOperator.NE,
        WhereOperator.IS_NULL,
    ]


def test_logic_key_sets_join_and_is_not_a_field() -> None:
    where_map = WhereMap.from_mapping({"tag_id": 10, LOGIC_KEY: "OR"})
    assert where_map.join is JoinMode.OR
    assert [c.field for c in where_map] == ["tag_id"]


def test_input_mapping_is_not_modified() -> None:
    mapping = {"tag_id": 10, "_logic": "or"}
    WhereMap.from_mapping(mapping)
    assert mapping == {"tag_id": 10, "_logic": "or"}


def test_logic_only_map_is_empty() -> None:
    where_map = WhereMap.from_mapping({"_logic": "or"})
    assert not where_map
    assert len(where_map) == 0


def test_unknown_operator_raises_in_strict_mode() -> None:
    with pytest.raises(OperatorNotFoundError) as exc_info:
        WhereMap.from_mapping({"x": ["bogus", 1]})
    assert exc_info.value.path == "x"


def test_unknown_operator_skipped_in_lenient_mode(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="wheremap.conditions"):
        where_map = WhereMap.from_mapping(
            {"x": ["bogus", 1], "y": 2}, strict=False
        )
    assert [c.field for c in where_map] == ["y"]
    assert "bogus" in caplog.text


@pytest.mark.parametrize("value", [[], ["in", [1], "extra"]])
def test_malformed_tagged_pair(value: list[object]) -> None:
    with pytest.raises(ValidationError):
        WhereMap.from_mapping({"x": value})


def test_empty_tagged_pair_skipped_in_lenient_mode(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="wheremap.conditions"):
        where_map = WhereMap.from_mapping({"x": [], "y": 1}, strict=False)
    assert [c.field for c in where_map] == ["y"]
    assert "no operator" in caplog.text


def test_trailing_items_ignored_in_lenient_mode(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="wheremap.conditions"):
        where_map = WhereMap.from_mapping(
            {"x": [">", 5, "extra", "more"], "y": 1}, strict=False
        )
    assert [(c.field, c.operator, c.operand) for c in where_map] == [
        ("x", WhereOperator.GT, 5),
        ("y", WhereOperator.EQ, 1),
    ]
    assert "2 trailing item(s)" in caplog.text


def test_non_mapping_input_is_rejected() -> None:
    with pytest.raises(ValidationError):
        WhereMap.from_mapping([("x", 1)])  # type: ignore[arg-type]


def test_of_coerces_all_inputs() -> None:
    existing = WhereMap.from_mapping({"a": 1})
    assert WhereMap.of(existing) is existing
    assert not WhereMap.of(None)
    assert len(WhereMap.of({"a": 1, "b": 2})) == 2


# ---------------------------------------------------------------------------
# JSON, validate, to_dict
# ---------------------------------------------------------------------------


def test_from_json() -> None:
    where_map = WhereMap.from_json('{"status": ["between", [1, 5]], "_logic": "or"}')
    assert where_map.join is JoinMode.OR
    assert where_map.conditions[0].operand == (1, 5)


@pytest.mark.parametrize("text", ["{not json", "[1, 2]"])
def test_from_json_rejects_bad_documents(text: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        WhereMap.from_json(text)
    assert exc_info.value.path == "<root>"


def test_validate_collects_every_problem() -> None:
    errors = WhereMap.validate(
        {"a": ["bogus", 1], "b": ["in", 3], "c": 1, "_logic": "xor"}
    )
    assert len(errors) == 3
    assert errors[0].startswith("a:")
    assert errors[1].startswith("b:")
    assert errors[2].startswith("_logic:")


def test_validate_clean_map() -> None:
    assert WhereMap.validate({"a": 1, "b": ["notnull"]}) == []


def test_to_dict_renders_loose_form() -> None:
    source = {
        "age": 30,
        "id": ["in", [1, 2]],
        "deleted_at": ["null"],
        "_logic": "or",
    }
    assert WhereMap.from_mapping(source).to_dict() == source


def test_to_dict_omits_logic_for_and() -> None:
    assert WhereMap.from_mapping({"a": 1}).to_dict() == {"a": 1}


def test_builder_style_construction() -> None:
    where_map = (
        WhereMap()
        .with_condition("age", ">", 18)
        .with_condition("status", "in", [1, 2])
        .with_join("or")
    )
    assert where_map.to_dict() == {
        "age": [">", 18],
        "status": ["in", [1, 2]],
        "_logic": "or",
    }
