from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import delete, inspect, select, update
from sqlalchemy.exc import SQLAlchemyError

from ..adapters.notifications import LoggingNotificationSink
from ..compiler import ConditionCompiler, ConditionsLike, require_conditions
from ..exceptions import (
    EmptyConditionError,
    EmptyPayloadError,
    FieldNotFoundError,
    RepositoryError,
    SoftDeleteNotSupportedError,
)
from ..notifications import Notifier
from ..settings import CrudSettings
from .batch import build_batch_update
from .builder import SelectBuilder
from .operators import DEFAULT_COLUMN_REGISTRY, ColumnOperatorRegistry
from .uow import SQLAlchemyUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Executable, Select

logger = logging.getLogger("wheremap.repository")

M = TypeVar("M")
UnitOfWorkFactory = Callable[[], SQLAlchemyUnitOfWork]


class CrudRepository(Generic[M]):
    """
    Condition-map driven CRUD over one mapped model.

    Every mutating operation takes a condition map (see
    :class:`~wheremap.conditions.WhereMap`), refuses an empty one and
    reports its outcome through a :class:`Notifier`. Failures are
    reported immediately; success is queued on the unit of work and
    only delivered after commit.

    Models mixing in :class:`SoftDeleteModelMixin` (or otherwise mapping
    ``settings.deleted_at_column``) get soft delete: ``destroy_data``
    stamps the column, reads hide trashed rows, ``restore_data`` clears
    it and ``force_delete_data`` removes rows for good.

    Supports two UoW patterns:

    1. **Per-call UoW**: ``await repo.store_data(data, uow=uow)``; the
       caller has entered *uow* and commits when its block ends.
    2. **Factory-injected UoW**: ``CrudRepository(Article, uow_factory=factory)``;
       each call enters a fresh unit of work and commits it before returning.
    """

    def __init__(
        self,
        model_cls: type[M],
        uow_factory: UnitOfWorkFactory | None = None,
        *,
        settings: CrudSettings | None = None,
        notifier: Notifier | None = None,
        compiler: ConditionCompiler | None = None,
        column_registry: ColumnOperatorRegistry | None = None,
    ) -> None:
        self.model_cls = model_cls
        self.settings = settings or CrudSettings()
        self.notifier = notifier or Notifier(
            LoggingNotificationSink(), locale=self.settings.locale
        )
        self._uow_factory = uow_factory
        self._compiler = compiler or ConditionCompiler(
            strict=self.settings.strict_operators
        )
        self._column_registry = column_registry or DEFAULT_COLUMN_REGISTRY
        self._mapper = inspect(model_cls)

    # -- UoW helpers --------------------------------------------------------

    @asynccontextmanager
    async def _unit_of_work(
        self, uow: SQLAlchemyUnitOfWork | None = None
    ) -> AsyncIterator[SQLAlchemyUnitOfWork]:
        if uow is not None:
            yield uow
            return
        if self._uow_factory is None:
            raise ValueError("No UnitOfWork provided or configured.")
        async with self._uow_factory() as active:
            yield active

    # -- model introspection ------------------------------------------------

    @property
    def model_name(self) -> str:
        return self.model_cls.__name__

    @property
    def column_names(self) -> list[str]:
        return list(self._mapper.column_attrs.keys())

    @property
    def supports_soft_delete(self) -> bool:
        return self.settings.deleted_at_column in self.column_names

    def _deleted_at(self) -> Any:
        if not self.supports_soft_delete:
            raise SoftDeleteNotSupportedError(
                self.model_name, self.settings.deleted_at_column
            )
        return getattr(self.model_cls, self.settings.deleted_at_column)

    def _check_fields(self, data: Mapping[str, Any]) -> None:
        columns = self.column_names
        for key in data:
            if key not in columns:
                raise FieldNotFoundError(key, self.model_name, columns)

    # -- notification helpers -----------------------------------------------

    def _flash(self, flash: bool | None) -> bool:
        return self.settings.flash if flash is None else flash

    def _notify_on_commit(
        self, uow: SQLAlchemyUnitOfWork, key: str, enabled: bool
    ) -> None:
        if not enabled:
            return

        async def _deliver() -> None:
            self.notifier.success(key)

        uow.on_commit(_deliver)

    def _require_criterion(
        self, conditions: ConditionsLike, operation: str, enabled: bool
    ) -> ColumnElement[bool]:
        try:
            where_map = require_conditions(
                conditions, operation, strict=self._compiler.strict
            )
            criterion = self.where_map(where_map).criterion()
            if criterion is None:
                raise EmptyConditionError(operation)
        except EmptyConditionError:
            self.notifier.error("conditions.empty", enabled)
            raise
        return criterion

    async def _execute_count(
        self,
        uow: SQLAlchemyUnitOfWork | None,
        stmt: Executable,
        prefix: str,
        enabled: bool,
    ) -> int:
        async with self._unit_of_work(uow) as active:
            try:
                result = await active.session.execute(stmt)
            except SQLAlchemyError as exc:
                logger.exception("%s failed on %s", prefix, self.model_name)
                self.notifier.error(f"{prefix}.failure", enabled)
                raise RepositoryError(
                    f"{prefix} on {self.model_name} failed: {exc}"
                ) from exc

            count = int(getattr(result, "rowcount", 0) or 0)
            if count:
                self._notify_on_commit(active, f"{prefix}.success", enabled)
            else:
                self.notifier.error(f"{prefix}.failure", enabled)
        logger.debug("%s on %s affected %d row(s)", prefix, self.model_name, count)
        return count

    # -- queries ------------------------------------------------------------

    def where_map(self, conditions: ConditionsLike) -> SelectBuilder:
        """Compile *conditions* into a :class:`SelectBuilder` for this model."""
        builder = SelectBuilder(self.model_cls, registry=self._column_registry)
        return self._compiler.compile(builder, conditions)

    def _scope_trashed(
        self, stmt: Select[Any], with_trashed: bool, only_trashed: bool
    ) -> Select[Any]:
        if only_trashed:
            return stmt.where(self._deleted_at().is_not(None))
        if with_trashed or not self.supports_soft_delete:
            return stmt
        return stmt.where(self._deleted_at().is_(None))

    async def search(
        self,
        conditions: ConditionsLike = None,
        *,
        with_trashed: bool = False,
        only_trashed: bool = False,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> list[M]:
        """Rows matching *conditions*; an empty map matches every live row."""
        stmt = self._scope_trashed(
            self.where_map(conditions).select(), with_trashed, only_trashed
        )
        async with self._unit_of_work(uow) as active:
            result = await active.session.execute(
                stmt.execution_options(populate_existing=True)
            )
            return list(result.scalars().all())

    async def find(
        self,
        entity_id: Any,
        *,
        with_trashed: bool = False,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> M | None:
        pk = self._mapper.primary_key[0]
        stmt = self._scope_trashed(
            select(self.model_cls).where(pk == entity_id), with_trashed, False
        )
        async with self._unit_of_work(uow) as active:
            result = await active.session.execute(
                stmt.execution_options(populate_existing=True)
            )
            return cast("M | None", result.scalar_one_or_none())

    # -- writes -------------------------------------------------------------

    async def store_data(
        self,
        data: Mapping[str, Any],
        *,
        flash: bool | None = None,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> Any:
        """
        Insert one row and return its primary key.

        Raises:
            EmptyPayloadError: *data* is empty.
            FieldNotFoundError: A key is not a mapped column.
            RepositoryError: The insert failed.
        """
        enabled = self._flash(flash)
        if not data:
            self.notifier.error("store.empty", enabled)
            raise EmptyPayloadError("store_data")
        self._check_fields(data)

        instance = self.model_cls(**data)
        async with self._unit_of_work(uow) as active:
            try:
                active.session.add(instance)
                await active.session.flush()
            except SQLAlchemyError as exc:
                logger.exception("store_data failed on %s", self.model_name)
                self.notifier.error("store.failure", enabled)
                raise RepositoryError(
                    f"store_data on {self.model_name} failed: {exc}"
                ) from exc
            self._notify_on_commit(active, "store.success", enabled)
            identity = self._mapper.primary_key_from_instance(instance)
        return identity[0] if len(identity) == 1 else tuple(identity)

    async def update_data(
        self,
        conditions: ConditionsLike,
        data: Mapping[str, Any],
        *,
        flash: bool | None = None,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> int:
        """
        Assign *data* to every matching row, trashed rows included.

        Returns the number of rows changed; ``0`` (with an
        ``update.not_found`` notification) when nothing matched.
        """
        enabled = self._flash(flash)
        criterion = self._require_criterion(conditions, "update_data", enabled)
        if not data:
            self.notifier.error("update.empty", enabled)
            raise EmptyPayloadError("update_data")
        self._check_fields(data)

        stmt = (
            select(self.model_cls)
            .where(criterion)
            .execution_options(populate_existing=True)
        )
        async with self._unit_of_work(uow) as active:
            try:
                result = await active.session.execute(stmt)
                rows = list(result.scalars().all())
                if not rows:
                    self.notifier.error("update.not_found", enabled)
                    return 0
                for row in rows:
                    for key, value in data.items():
                        setattr(row, key, value)
                await active.session.flush()
            except SQLAlchemyError as exc:
                logger.exception("update_data failed on %s", self.model_name)
                self.notifier.error("update.failure", enabled)
                raise RepositoryError(
                    f"update_data on {self.model_name} failed: {exc}"
                ) from exc
            self._notify_on_commit(active, "update.success", enabled)
            return len(rows)

    async def destroy_data(
        self,
        conditions: ConditionsLike,
        *,
        flash: bool | None = None,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> int:
        """
        Delete matching rows.

        Soft-delete models get ``deleted_at`` stamped on live rows; other
        models lose the rows for good.
        """
        enabled = self._flash(flash)
        criterion = self._require_criterion(conditions, "destroy_data", enabled)

        stmt: Executable
        if self.supports_soft_delete:
            deleted_at = self._deleted_at()
            stmt = (
                update(self.model_cls)
                .where(criterion, deleted_at.is_(None))
                .values({self.settings.deleted_at_column: datetime.now(timezone.utc)})
                .execution_options(synchronize_session=False)
            )
        else:
            stmt = (
                delete(self.model_cls)
                .where(criterion)
                .execution_options(synchronize_session=False)
            )
        return await self._execute_count(uow, stmt, "destroy", enabled)

    async def restore_data(
        self,
        conditions: ConditionsLike,
        *,
        flash: bool | None = None,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> int:
        """
        Clear ``deleted_at`` on matching trashed rows.

        Raises:
            SoftDeleteNotSupportedError: The model has no soft-delete column.
        """
        enabled = self._flash(flash)
        criterion = self._require_criterion(conditions, "restore_data", enabled)
        try:
            deleted_at = self._deleted_at()
        except SoftDeleteNotSupportedError:
            self.notifier.error("restore.failure", enabled)
            raise

        stmt = (
            update(self.model_cls)
            .where(criterion, deleted_at.is_not(None))
            .values({self.settings.deleted_at_column: None})
            .execution_options(synchronize_session=False)
        )
        return await self._execute_count(uow, stmt, "restore", enabled)

    async def force_delete_data(
        self,
        conditions: ConditionsLike,
        *,
        flash: bool | None = None,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> int:
        """Permanently delete matching rows, trashed or not."""
        enabled = self._flash(flash)
        criterion = self._require_criterion(conditions, "force_delete_data", enabled)

        stmt = (
            delete(self.model_cls)
            .where(criterion)
            .execution_options(synchronize_session=False)
        )
        return await self._execute_count(uow, stmt, "force_delete", enabled)

    async def update_batch(
        self,
        rows: Sequence[Mapping[str, Any]],
        *,
        flash: bool | None = None,
        uow: SQLAlchemyUnitOfWork | None = None,
    ) -> int:
        """
        Update many rows in one statement.

        The first key of each row identifies it, the remaining keys are
        assigned. An empty *rows* is a no-op returning ``0``.
        """
        if not rows:
            return 0
        enabled = self._flash(flash)
        stmt = build_batch_update(self.model_cls, rows)
        return await self._execute_count(uow, stmt, "batch", enabled)
