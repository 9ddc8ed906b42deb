"""E-Mail notification channel."""

from __future__ import annotations

from backup_hooks.core.models import NotificationProvider
from backup_hooks.notifications.base import BaseChannel, Payload

SUBJECT = "Backitup"


class EmailChannel(BaseChannel):
    """Send messages through an e-mail adapter instance."""

    provider = NotificationProvider.EMAIL

    def build_payload(self, message: str) -> Payload | None:
        cfg = self.config
        if not (cfg.email_instance and cfg.email_receiver and cfg.email_sender):
            return None
        return Payload(
            instance=cfg.email_instance,
            command=self.command,
            params={
                "text": self.format_text(message),
                "to": cfg.email_receiver,
                "subject": SUBJECT,
                "from": cfg.email_sender,
            },
        )
