"""
Soft-delete column mixin.

Models that mix in :class:`SoftDeleteModelMixin` get a nullable
``deleted_at`` column; :class:`CrudRepository` then treats
``destroy_data`` as a soft delete and hides trashed rows from reads.

Indexes:
- Live rows (deleted_at IS NULL) and trashed rows (deleted_at IS NOT NULL)
  each get a partial index.
- ``__soft_delete_unique_columns__ = ("code",)`` adds a partial UNIQUE index
  so a value is unique among live rows only. Use a sequence of sequences
  for several constraints.

A subclass that defines its own ``__table_args__`` must merge in
``SoftDeleteModelMixin.__table_args__(cls)`` or the indexes are lost.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


class SoftDeleteModelMixin:
    """Adds ``deleted_at``; a row is trashed when it is set."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None, index=True
    )

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    @declared_attr.directive
    def __table_args__(cls: Any) -> tuple[Any, ...]:  # noqa: N805
        live = cls.deleted_at.is_(None)
        trashed = cls.deleted_at.is_not(None)
        indexes: list[Index] = [
            Index(
                f"ix_{cls.__tablename__}_live",
                cls.deleted_at,
                postgresql_where=live,
                sqlite_where=live,
            ),
            Index(
                f"ix_{cls.__tablename__}_trashed",
                cls.deleted_at,
                postgresql_where=trashed,
                sqlite_where=trashed,
            ),
        ]
        raw = getattr(cls, "__soft_delete_unique_columns__", None)
        if raw:
            if isinstance(next(iter(raw)), str):
                groups: list[tuple[str, ...]] = [tuple(raw)]
            else:
                groups = [tuple(cols) for cols in raw]
            for cols in groups:
                indexes.append(
                    Index(
                        f"uq_{cls.__tablename__}_live_{'_'.join(cols)}",
                        *(getattr(cls, c) for c in cols),
                        unique=True,
                        postgresql_where=live,
                        sqlite_where=live,
                    )
                )
        return tuple(indexes)
