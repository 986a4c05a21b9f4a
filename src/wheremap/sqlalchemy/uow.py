"""
Transaction scope for the CRUD helpers.

One ``AsyncSession`` per scope. Success notifications are queued on the
scope and only delivered once the commit went through; a scope that
rolls back drops them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import SessionManagementError, UnitOfWorkError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncSession

    AsyncSessionFactory = Callable[[], AsyncSession]
    CommitHook = Callable[[], Awaitable[Any]]

logger = logging.getLogger("wheremap.uow")


class SQLAlchemyUnitOfWork:
    """
    Async context manager around one ``AsyncSession``.

    Pass ``session=`` when the caller owns the session (it stays open
    afterwards), or ``session_factory=`` to open a fresh session on enter
    and close it on exit. Exactly one of the two is required.

    Leaving the block normally commits, closes an owned session and then
    runs the hooks queued with :meth:`on_commit`. Leaving it with an
    exception rolls back and forgets the hooks.

    ```python
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with SQLAlchemyUnitOfWork(session_factory=factory) as uow:
        await repo.store_data({"name": "x"}, uow=uow)
    ```
    """

    def __init__(
        self,
        session: AsyncSession | None = None,
        *,
        session_factory: AsyncSessionFactory | None = None,
    ) -> None:
        if (session is None) == (session_factory is None):
            raise SessionManagementError(
                "Provide exactly one of 'session' or 'session_factory'."
            )
        self._session = session
        self._session_factory = session_factory
        self._hooks: list[CommitHook] = []

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise UnitOfWorkError("No active session; enter the unit of work first.")
        return self._session

    @property
    def pending_callbacks(self) -> int:
        return len(self._hooks)

    def on_commit(self, hook: CommitHook) -> None:
        """Queue *hook* to run after this scope commits."""
        self._hooks.append(hook)

    async def __aenter__(self) -> SQLAlchemyUnitOfWork:
        try:
            if self._session_factory is not None:
                self._session = self._session_factory()
            if not self.session.in_transaction():
                await self.session.begin()
        except SQLAlchemyError as exc:
            await self._release()
            raise SessionManagementError(f"Failed to open unit of work: {exc}") from exc
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                self._hooks.clear()
                await self.rollback()
        finally:
            await self._release()
        if exc_type is None:
            await self._run_hooks()

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            self._hooks.clear()
            await self.rollback()
            raise UnitOfWorkError(f"Failed to commit transaction: {exc}") from exc

    async def rollback(self) -> None:
        if not self.session.in_transaction():
            return
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            raise UnitOfWorkError(f"Failed to roll back transaction: {exc}") from exc

    async def _release(self) -> None:
        if self._session_factory is None or self._session is None:
            return
        session, self._session = self._session, None
        try:
            await session.close()
        except SQLAlchemyError as exc:
            raise SessionManagementError(f"Failed to close session: {exc}") from exc

    async def _run_hooks(self) -> None:
        hooks, self._hooks = self._hooks, []
        for hook in hooks:
            try:
                await hook()
            except Exception:  # noqa: BLE001
                logger.exception("on_commit hook failed")
