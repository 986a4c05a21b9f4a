"""Notification sinks: in-memory (tests) and logging (development)."""

from __future__ import annotations

import logging

from ..notifications import Notification, NotificationLevel
from ..ports.notifications import INotificationSink


class InMemoryNotificationSink(INotificationSink):
    """Test double that keeps every notification in a list."""

    def __init__(self) -> None:
        self.messages: list[Notification] = []

    def push(self, notification: Notification) -> None:
        self.messages.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.messages[-1] if self.messages else None

    def keys(self) -> list[str]:
        return [m.key for m in self.messages]

    def assert_notified(
        self,
        key: str,
        level: NotificationLevel | None = None,
        count: int = 1,
    ) -> None:
        """Helper for test assertions."""
        matches = [
            m
            for m in self.messages
            if m.key == key and (level is None or m.level is level)
        ]
        if len(matches) != count:
            raise AssertionError(
                f"Expected {count} notification(s) '{key}', "
                f"found {len(matches)}. Recorded: {self.keys()}"
            )

    def clear(self) -> None:
        self.messages.clear()


class LoggingNotificationSink(INotificationSink):
    """Writes notifications to the log instead of a user session."""

    def __init__(self, logger_name: str = "wheremap.flash") -> None:
        self._logger = logging.getLogger(logger_name)

    def push(self, notification: Notification) -> None:
        level = logging.WARNING if notification.is_error else logging.INFO
        self._logger.log(
            level,
            "[%s] %s (%s)",
            notification.level.value,
            notification.message,
            notification.key,
        )
