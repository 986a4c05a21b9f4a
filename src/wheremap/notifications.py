"""
Localized success/failure notifications ("flash messages").

Repository operations report their outcome through a :class:`Notifier`,
which resolves a message key against a :class:`MessageCatalog` and pushes
a :class:`Notification` to an ``INotificationSink``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports.notifications import INotificationSink

logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en"


class NotificationLevel(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A rendered, user-facing message."""

    level: NotificationLevel
    key: str
    message: str
    locale: str

    @property
    def is_error(self) -> bool:
        return self.level is NotificationLevel.ERROR


_EN: dict[str, str] = {
    "store.empty": "There is no data to add.",
    "store.success": "Added successfully.",
    "store.failure": "Failed to add.",
    "conditions.empty": "The condition is empty.",
    "update.empty": "The data to update is empty.",
    "update.not_found": "No matching records to update.",
    "update.success": "Updated successfully.",
    "update.failure": "Failed to update.",
    "destroy.success": "Deleted successfully.",
    "destroy.failure": "Failed to delete.",
    "restore.success": "Restored successfully.",
    "restore.failure": "Failed to restore.",
    "force_delete.success": "Permanently deleted.",
    "force_delete.failure": "Failed to delete permanently.",
    "batch.success": "Operation succeeded.",
    "batch.failure": "Operation failed.",
}

_ZH_CN: dict[str, str] = {
    "store.empty": "无需要添加的数据",
    "store.success": "添加成功",
    "store.failure": "添加失败",
    "conditions.empty": "条件为空",
    "update.empty": "修改的数据为空",
    "update.not_found": "无需要修改的数据",
    "update.success": "修改成功",
    "update.failure": "修改失败",
    "destroy.success": "删除成功",
    "destroy.failure": "删除失败",
    "restore.success": "恢复成功",
    "restore.failure": "恢复失败",
    "force_delete.success": "彻底删除成功",
    "force_delete.failure": "彻底删除失败",
    "batch.success": "操作成功",
    "batch.failure": "操作失败",
}


class MessageCatalog:
    """
    Message texts per locale.

    Lookup falls back to the ``en`` catalog, then to the key itself, so
    a missing translation never breaks an operation.
    """

    def __init__(self, messages: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._messages: dict[str, dict[str, str]] = {
            locale: dict(texts) for locale, texts in (messages or {}).items()
        }

    @property
    def locales(self) -> set[str]:
        return set(self._messages)

    def has_locale(self, locale: str) -> bool:
        return locale in self._messages

    def add(self, locale: str, messages: Mapping[str, str]) -> None:
        """Add or override texts for *locale*."""
        self._messages.setdefault(locale, {}).update(messages)

    def resolve(self, key: str, locale: str) -> str:
        text = self._messages.get(locale, {}).get(key)
        if text is None and locale != FALLBACK_LOCALE:
            text = self._messages.get(FALLBACK_LOCALE, {}).get(key)
        if text is None:
            logger.debug("No message for key '%s' (locale=%s)", key, locale)
            return key
        return text


def default_catalog() -> MessageCatalog:
    """Catalog with the built-in ``en`` and ``zh_CN`` texts."""
    return MessageCatalog({"en": _EN, "zh_CN": _ZH_CN})


class Notifier:
    """Resolves message keys and pushes notifications to a sink."""

    def __init__(
        self,
        sink: INotificationSink,
        catalog: MessageCatalog | None = None,
        locale: str = FALLBACK_LOCALE,
    ) -> None:
        self.sink = sink
        self.catalog = catalog or default_catalog()
        self.locale = locale

    def success(self, key: str, enabled: bool = True) -> Notification | None:
        return self._emit(NotificationLevel.SUCCESS, key, enabled)

    def error(self, key: str, enabled: bool = True) -> Notification | None:
        return self._emit(NotificationLevel.ERROR, key, enabled)

    def _emit(
        self,
        level: NotificationLevel,
        key: str,
        enabled: bool,
    ) -> Notification | None:
        if not enabled:
            return None
        notification = Notification(
            level=level,
            key=key,
            message=self.catalog.resolve(key, self.locale),
            locale=self.locale,
        )
        self.sink.push(notification)
        return notification
