"""Per-user silencer list: persistence and change notification."""

from .notify import NotificationPublisher, LIST_CHANGED_EVENT
from .store import BlockListKey, SilencerStore

__all__ = [
    "BlockListKey",
    "LIST_CHANGED_EVENT",
    "NotificationPublisher",
    "SilencerStore",
]
