"""Discord notification channel."""

from __future__ import annotations

import re

from backup_hooks.core.models import NotificationProvider
from backup_hooks.notifications.base import BaseChannel, Payload

_USER_TARGET = re.compile(r"\d+", re.ASCII)
_CHANNEL_TARGET = re.compile(r"(\d+)/(\d+)", re.ASCII)


def parse_target(target: str) -> dict[str, str] | None:
    """Turn a configured target into routing fields.

    ``"123"`` addresses a user directly, ``"123/456"`` a channel on a server.
    Any other shape yields None.
    """
    if _USER_TARGET.fullmatch(target):
        return {"userId": target}
    if m := _CHANNEL_TARGET.fullmatch(target):
        return {"serverId": m.group(1), "channelId": m.group(2)}
    return None


class DiscordChannel(BaseChannel):
    """Send messages through a Discord adapter instance."""

    provider = NotificationProvider.DISCORD
    command = "sendMessage"

    def build_payload(self, message: str) -> Payload | None:
        cfg = self.config
        if not (cfg.discord_instance and cfg.discord_target):
            return None
        route = parse_target(cfg.discord_target)
        if route is None:
            return None
        return Payload(
            instance=cfg.discord_instance,
            command=self.command,
            params={**route, "content": self.format_text(message)},
        )
