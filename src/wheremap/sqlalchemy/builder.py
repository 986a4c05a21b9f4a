"""
SelectBuilder: an immutable ``IQueryBuilder`` over a mapped model.

Every builder call resolves its field against the model, turns it into a
``ColumnElement[bool]`` through the :class:`ColumnOperatorRegistry` and
returns a new builder with the clause appended. :meth:`criterion` folds
the clauses left to right, ``AND`` or ``OR`` according to how each one
was added.

Dotted fields traverse relationships: ``"tags.name"`` becomes
``Model.tags.any(Tag.name == ...)`` for collections and ``.has(...)``
for scalar relationships.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, inspect, or_, select

from ..exceptions import FieldNotFoundError, ValidationError
from ..operators import JoinMode, WhereOperator
from .operators import DEFAULT_COLUMN_REGISTRY, ColumnOperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select


def mapped_fields(model: type[Any]) -> list[str]:
    """Public attribute names SQLAlchemy maps on *model*."""
    return [
        key
        for key in inspect(model).all_orm_descriptors.keys()  # noqa: SIM118
        if not key.startswith("_")
    ]


def resolve_clause(
    model: type[Any],
    path: str,
    operator: WhereOperator,
    value: Any,
    registry: ColumnOperatorRegistry,
    *,
    full_path: str | None = None,
) -> ColumnElement[bool]:
    """
    Build the clause for ``path <operator> value`` on *model*.

    Raises:
        FieldNotFoundError: If a path segment is not mapped.
        ValidationError: If a non-final segment is not a relationship.
    """
    full_path = full_path or path
    if "." in path:
        rel_name, nested = path.split(".", 1)
        mapper = inspect(model)
        if rel_name not in mapper.relationships:
            if rel_name in mapper.all_orm_descriptors:
                raise ValidationError(
                    f"'{rel_name}' on '{model.__name__}' is not a relationship",
                    path=full_path,
                )
            raise FieldNotFoundError(
                rel_name, model.__name__, mapped_fields(model), full_path
            )
        prop = mapper.relationships[rel_name]
        inner = resolve_clause(
            prop.mapper.class_, nested, operator, value, registry, full_path=full_path
        )
        rel_attr = getattr(model, rel_name)
        if prop.uselist:
            return rel_attr.any(inner)  # type: ignore[no-any-return]
        return rel_attr.has(inner)  # type: ignore[no-any-return]

    available = mapped_fields(model)
    if path not in available:
        raise FieldNotFoundError(path, model.__name__, available, full_path)
    return registry.apply(operator, getattr(model, path), value)


@dataclass(frozen=True)
class SelectBuilder:
    """
    Collects WHERE clauses for *model*.

    ```python
    builder = compile_where_map(SelectBuilder(Article), {"status": ["in", [1, 2]]})
    rows = (await session.execute(builder.select())).scalars().all()
    ```
    """

    model: type[Any]
    clauses: tuple[tuple[JoinMode, ColumnElement[bool]], ...] = ()
    registry: ColumnOperatorRegistry = field(
        default=DEFAULT_COLUMN_REGISTRY, compare=False, repr=False
    )

    def __len__(self) -> int:
        return len(self.clauses)

    def criterion(self) -> ColumnElement[bool] | None:
        """The folded WHERE expression, or ``None`` when nothing was added."""
        expr: ColumnElement[bool] | None = None
        for join, clause in self.clauses:
            if expr is None:
                expr = clause
            elif join is JoinMode.OR:
                expr = or_(expr, clause)
            else:
                expr = and_(expr, clause)
        return expr

    def apply(self, stmt: Any) -> Any:
        """Add the criterion to a ``select``/``update``/``delete`` statement."""
        expr = self.criterion()
        return stmt if expr is None else stmt.where(expr)

    def select(self) -> Select[Any]:
        return self.apply(select(self.model))  # type: ignore[no-any-return]

    def _add(
        self,
        join: JoinMode,
        path: str,
        operator: WhereOperator,
        value: Any = None,
    ) -> SelectBuilder:
        clause = resolve_clause(self.model, path, operator, value, self.registry)
        return replace(self, clauses=(*self.clauses, (join, clause)))

    def where(self, field: str, op: str, value: Any) -> SelectBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.parse(op, path=field), value)

    def or_where(self, field: str, op: str, value: Any) -> SelectBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.parse(op, path=field), value)

    def where_in(self, field: str, values: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.IN, values)

    def or_where_in(self, field: str, values: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.IN, values)

    def where_not_in(self, field: str, values: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.NOT_IN, values)

    def or_where_not_in(self, field: str, values: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.NOT_IN, values)

    def where_between(self, field: str, bounds: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.BETWEEN, bounds)

    def or_where_between(self, field: str, bounds: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.BETWEEN, bounds)

    def where_not_between(self, field: str, bounds: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.NOT_BETWEEN, bounds)

    def or_where_not_between(self, field: str, bounds: Sequence[Any]) -> SelectBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.NOT_BETWEEN, bounds)

    def where_null(self, field: str) -> SelectBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.IS_NULL)

    def or_where_null(self, field: str) -> SelectBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.IS_NULL)

    def where_not_null(self, field: str) -> SelectBuilder:
        return self._add(JoinMode.AND, field, WhereOperator.IS_NOT_NULL)

    def or_where_not_null(self, field: str) -> SelectBuilder:
        return self._add(JoinMode.OR, field, WhereOperator.IS_NOT_NULL)
