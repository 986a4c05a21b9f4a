"""
Single-statement batch update.

Given rows that share the same keys, the first key is the reference
column and the rest are assigned per row::

    rows = [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}]

    UPDATE article
       SET title = CASE WHEN id = 1 THEN 'a' WHEN id = 2 THEN 'b' ELSE title END
     WHERE id IN (1, 2)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import case, inspect, update

from ..exceptions import EmptyPayloadError, FieldNotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy import Column, Table, Update


def _column(table: Table, name: str) -> Column[Any]:
    if name not in table.c:
        raise FieldNotFoundError(name, table.name, list(table.c.keys()))
    return table.c[name]


def build_batch_update(
    model: type[Any],
    rows: Sequence[Mapping[str, Any]],
) -> Update:
    """
    Build one ``UPDATE ... SET col = CASE ...`` for *rows*.

    Raises:
        EmptyPayloadError: If *rows* is empty.
        ValidationError: If the rows do not share the same keys, or carry
            nothing besides the reference column.
        FieldNotFoundError: If a key is not a column of the model's table.
    """
    if not rows:
        raise EmptyPayloadError("update_batch")

    keys = list(rows[0].keys())
    if len(keys) < 2:
        raise ValidationError(
            "Batch rows need a reference column and at least one column to set",
            path="rows[0]",
        )
    for index, row in enumerate(rows):
        if set(row.keys()) != set(keys):
            raise ValidationError(
                f"Batch row keys {sorted(row.keys())} differ from {sorted(keys)}",
                path=f"rows[{index}]",
            )

    table: Table = inspect(model).local_table
    reference, *targets = keys
    ref_col = _column(table, reference)

    values: dict[str, Any] = {}
    for name in targets:
        col = _column(table, name)
        values[name] = case(
            *[(ref_col == row[reference], row[name]) for row in rows],
            else_=col,
        )

    ref_values = list(dict.fromkeys(row[reference] for row in rows))
    return update(table).where(ref_col.in_(ref_values)).values(values)
