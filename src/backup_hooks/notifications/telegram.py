"""Telegram notification channel."""

from __future__ import annotations

from backup_hooks.core.models import NotificationProvider
from backup_hooks.notifications.base import BaseChannel, Payload

# Sentinel user value that addresses every user known to the Telegram adapter.
ALL_USERS = "allTelegramUsers"


class TelegramChannel(BaseChannel):
    """Send messages through a Telegram adapter instance."""

    provider = NotificationProvider.TELEGRAM

    def build_payload(self, message: str) -> Payload | None:
        instance = self.config.telegram_instance
        if not instance:
            return None

        params: dict = {
            "text": self.format_text(message),
            "disable_notification": self.config.telegram_silent,
        }
        user = self.config.telegram_user
        if user and user != ALL_USERS:
            params = {"user": user, **params}
        return Payload(instance=instance, command=self.command, params=params)
