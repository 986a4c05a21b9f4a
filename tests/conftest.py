from __future__ import annotations

import pytest

from wheremap.adapters.notifications import InMemoryNotificationSink
from wheremap.notifications import Notifier


@pytest.fixture
def sink() -> InMemoryNotificationSink:
    return InMemoryNotificationSink()


@pytest.fixture
def notifier(sink: InMemoryNotificationSink) -> Notifier:
    return Notifier(sink)
