"""Notification sink port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..notifications import Notification


@runtime_checkable
class INotificationSink(Protocol):
    """
    Where flash messages end up.

    A web app would stash them in the user session; tests collect them
    in memory.
    """

    def push(self, notification: Notification) -> None:
        """Deliver one notification."""
        ...
