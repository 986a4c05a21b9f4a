"""SQLAlchemy integration: select builder, soft-delete mixin, unit of work
and the condition-map CRUD repository."""

from .batch import build_batch_update
from .builder import SelectBuilder, mapped_fields, resolve_clause
from .mixins import SoftDeleteModelMixin
from .operators import (
    DEFAULT_COLUMN_REGISTRY,
    ColumnOperatorRegistry,
    build_default_column_registry,
)
from .repository import CrudRepository
from .uow import SQLAlchemyUnitOfWork

__all__ = [
    "DEFAULT_COLUMN_REGISTRY",
    "ColumnOperatorRegistry",
    "CrudRepository",
    "SQLAlchemyUnitOfWork",
    "SelectBuilder",
    "SoftDeleteModelMixin",
    "build_batch_update",
    "build_default_column_registry",
    "mapped_fields",
    "resolve_clause",
]
