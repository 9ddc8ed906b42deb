"""Notification channels and dispatch."""

from __future__ import annotations

from backup_hooks.notifications.base import BaseChannel, NotificationTransport, Payload
from backup_hooks.notifications.dispatcher import CHANNELS, dispatch, get_channel
from backup_hooks.notifications.transport import HttpTransport, RecordingTransport

__all__ = [
    "CHANNELS",
    "BaseChannel",
    "HttpTransport",
    "NotificationTransport",
    "Payload",
    "RecordingTransport",
    "dispatch",
    "get_channel",
]
