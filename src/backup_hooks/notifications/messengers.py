"""Chat adapters that only need an instance and the message text."""

from __future__ import annotations

from typing import ClassVar

from backup_hooks.core.models import NotificationProvider
from backup_hooks.notifications.base import BaseChannel, Payload


class TextChannel(BaseChannel):
    """Channel whose payload is just ``{"text": ...}``."""

    instance_field: ClassVar[str]

    def build_payload(self, message: str) -> Payload | None:
        instance = getattr(self.config, self.instance_field)
        if not instance:
            return None
        return Payload(
            instance=instance,
            command=self.command,
            params={"text": self.format_text(message)},
        )


class WhatsAppChannel(TextChannel):
    provider = NotificationProvider.WHATSAPP
    instance_field = "whatsapp_instance"


class SignalChannel(TextChannel):
    provider = NotificationProvider.SIGNAL
    instance_field = "signal_instance"


class MatrixChannel(TextChannel):
    provider = NotificationProvider.MATRIX
    instance_field = "matrix_instance"
