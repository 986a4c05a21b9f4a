"""Ports: protocols the adapters implement."""

from .builder import IQueryBuilder
from .notifications import INotificationSink

__all__ = [
    "INotificationSink",
    "IQueryBuilder",
]
