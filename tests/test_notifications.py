"""Tests for message catalogs, the notifier and the bundled sinks."""

from __future__ import annotations

import logging

import pytest

from wheremap.adapters.notifications import (
    InMemoryNotificationSink,
    LoggingNotificationSink,
)
from wheremap.notifications import (
    MessageCatalog,
    NotificationLevel,
    Notifier,
    default_catalog,
)
from wheremap.ports.notifications import INotificationSink


def test_default_catalog_locales() -> None:
    catalog = default_catalog()
    assert catalog.locales == {"en", "zh_CN"}
    assert catalog.resolve("store.success", "zh_CN") == "添加成功"
    assert catalog.resolve("conditions.empty", "zh_CN") == "条件为空"


def test_english_and_chinese_catalogs_share_keys() -> None:
    catalog = default_catalog()
    keys = [
        "store.empty",
        "store.success",
        "store.failure",
        "conditions.empty",
        "update.empty",
        "update.not_found",
        "update.success",
        "update.failure",
        "destroy.success",
        "destroy.failure",
        "restore.success",
        "restore.failure",
        "force_delete.success",
        "force_delete.failure",
        "batch.success",
        "batch.failure",
    ]
    for key in keys:
        assert catalog.resolve(key, "en") != key
        assert catalog.resolve(key, "zh_CN") != key


def test_resolve_falls_back_to_english_then_key() -> None:
    catalog = default_catalog()
    assert catalog.resolve("store.success", "fr") == "Added successfully."
    assert catalog.resolve("no.such.key", "zh_CN") == "no.such.key"


def test_catalog_add_overrides_text() -> None:
    catalog = MessageCatalog({"en": {"store.success": "Saved"}})
    catalog.add("de", {"store.success": "Gespeichert"})
    assert catalog.has_locale("de")
    assert catalog.resolve("store.success", "de") == "Gespeichert"
    assert catalog.resolve("store.success", "en") == "Saved"


def test_notifier_pushes_resolved_message(
    notifier: Notifier, sink: InMemoryNotificationSink
) -> None:
    notification = notifier.success("update.success")

    assert notification is not None
    assert notification.level is NotificationLevel.SUCCESS
    assert notification.message == "Updated successfully."
    assert sink.last == notification


def test_notifier_disabled_emits_nothing(
    notifier: Notifier, sink: InMemoryNotificationSink
) -> None:
    assert notifier.error("destroy.failure", enabled=False) is None
    assert sink.messages == []


def test_notifier_locale(sink: InMemoryNotificationSink) -> None:
    notifier = Notifier(sink, locale="zh_CN")
    notification = notifier.error("force_delete.failure")

    assert notification is not None
    assert notification.is_error
    assert notification.message == "彻底删除失败"
    assert notification.locale == "zh_CN"


def test_in_memory_sink_assertions(
    notifier: Notifier, sink: InMemoryNotificationSink
) -> None:
    notifier.success("store.success")
    notifier.error("store.failure")

    sink.assert_notified("store.success", NotificationLevel.SUCCESS)
    sink.assert_notified("store.failure", count=1)
    sink.assert_notified("batch.success", count=0)
    with pytest.raises(AssertionError, match="Recorded"):
        sink.assert_notified("store.success", NotificationLevel.ERROR)

    sink.clear()
    assert sink.keys() == []


def test_sinks_satisfy_protocol() -> None:
    assert isinstance(InMemoryNotificationSink(), INotificationSink)
    assert isinstance(LoggingNotificationSink(), INotificationSink)


def test_logging_sink_levels(caplog: pytest.LogCaptureFixture) -> None:
    notifier = Notifier(LoggingNotificationSink())

    with caplog.at_level(logging.INFO, logger="wheremap.flash"):
        notifier.success("restore.success")
        notifier.error("restore.failure")

    levels = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert levels == [
        (logging.INFO, "[success] Restored successfully. (restore.success)"),
        (logging.WARNING, "[error] Failed to restore. (restore.failure)"),
    ]
