"""In-memory and logging adapters for the wheremap ports."""

from .notifications import InMemoryNotificationSink, LoggingNotificationSink
from .recording import Predicate, RecordingBuilder

__all__ = [
    "InMemoryNotificationSink",
    "LoggingNotificationSink",
    "Predicate",
    "RecordingBuilder",
]
