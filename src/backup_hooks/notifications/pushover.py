"""Pushover notification channel."""

from __future__ import annotations

from backup_hooks.core.models import NotificationProvider
from backup_hooks.notifications.base import BaseChannel, Payload

TITLE = "Backitup"
SILENT_PRIORITY = -1


def is_silent(flag: bool | str) -> bool:
    """Silent mode is stored either as a boolean or as the string "true"."""
    return flag is True or flag == "true"


class PushoverChannel(BaseChannel):
    """Send messages through a Pushover adapter instance."""

    provider = NotificationProvider.PUSHOVER

    def build_payload(self, message: str) -> Payload | None:
        cfg = self.config
        if not (cfg.pushover_instance and cfg.pushover_device_id):
            return None

        params: dict = {
            "message": self.format_text(message),
            "sound": "",
            "title": TITLE,
            "device": cfg.pushover_device_id,
        }
        if is_silent(cfg.pushover_silent):
            params["priority"] = SILENT_PRIORITY
        return Payload(instance=cfg.pushover_instance, command=self.command, params=params)
