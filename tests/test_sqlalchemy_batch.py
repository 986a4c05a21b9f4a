from __future__ import annotations

import pytest
from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from wheremap.exceptions import EmptyPayloadError, FieldNotFoundError, ValidationError
from wheremap.sqlalchemy.batch import build_batch_update


class Base(DeclarativeBase):
    pass


class Product(Base):
    __tablename__ = "products"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String)
    price: Mapped[int] = mapped_column(Integer, default=0)


def _sql(stmt: object) -> str:
    return " ".join(
        str(stmt.compile(compile_kwargs={"literal_binds": True})).split()  # type: ignore[attr-defined]
    )


def test_builds_case_per_column() -> None:
    stmt = build_batch_update(
        Product,
        [{"id": 1, "name": "a", "price": 10}, {"id": 2, "name": "b", "price": 20}],
    )
    sql = _sql(stmt)

    assert sql.startswith("UPDATE products SET")
    assert (
        "name=CASE WHEN (products.id = 1) THEN 'a' WHEN (products.id = 2) THEN 'b' "
        "ELSE products.name END"
    ) in sql
    assert "ELSE products.price END" in sql
    assert sql.endswith("WHERE products.id IN (1, 2)")


def test_reference_values_are_deduplicated() -> None:
    stmt = build_batch_update(Product, [{"id": 1, "name": "a"}, {"id": 1, "name": "b"}])
    assert _sql(stmt).endswith("WHERE products.id IN (1)")


def test_values_are_bound_parameters() -> None:
    stmt = build_batch_update(Product, [{"id": 1, "name": "x'; DROP TABLE products"}])
    compiled = stmt.compile()
    assert "DROP TABLE" not in str(compiled)
    assert "x'; DROP TABLE products" in compiled.params.values()


def test_empty_rows() -> None:
    with pytest.raises(EmptyPayloadError):
        build_batch_update(Product, [])


def test_rows_need_a_column_to_set() -> None:
    with pytest.raises(ValidationError, match="reference column"):
        build_batch_update(Product, [{"id": 1}])


def test_mismatched_keys() -> None:
    with pytest.raises(ValidationError) as exc_info:
        build_batch_update(Product, [{"id": 1, "name": "a"}, {"id": 2, "price": 3}])
    assert exc_info.value.path == "rows[1]"


def test_unknown_column() -> None:
    with pytest.raises(FieldNotFoundError) as exc_info:
        build_batch_update(Product, [{"id": 1, "nmae": "a"}])
    assert exc_info.value.suggestions == ["name"]
