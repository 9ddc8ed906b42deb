"""Send a status message through the configured notification channel."""

from __future__ import annotations

from backup_hooks.core.exceptions import DeliveryError
from backup_hooks.core.models import NotificationConfig, NotificationProvider
from backup_hooks.logging import get_logger
from backup_hooks.notifications.base import BaseChannel, NotificationTransport
from backup_hooks.notifications.discord import DiscordChannel
from backup_hooks.notifications.email import EmailChannel
from backup_hooks.notifications.messengers import MatrixChannel, SignalChannel, WhatsAppChannel
from backup_hooks.notifications.pushover import PushoverChannel
from backup_hooks.notifications.telegram import TelegramChannel

log = get_logger(__name__)

CHANNELS: dict[NotificationProvider, type[BaseChannel]] = {
    NotificationProvider.TELEGRAM: TelegramChannel,
    NotificationProvider.EMAIL: EmailChannel,
    NotificationProvider.PUSHOVER: PushoverChannel,
    NotificationProvider.WHATSAPP: WhatsAppChannel,
    NotificationProvider.SIGNAL: SignalChannel,
    NotificationProvider.MATRIX: MatrixChannel,
    NotificationProvider.DISCORD: DiscordChannel,
}


def get_channel(config: NotificationConfig) -> BaseChannel | None:
    """Instantiate the channel selected by ``config.provider``.

    Unknown or unset providers yield None.
    """
    if not config.provider:
        return None
    try:
        provider = NotificationProvider(config.provider)
    except ValueError:
        log.debug("notification_provider_unsupported", provider=config.provider)
        return None
    return CHANNELS[provider](config)


async def dispatch(
        config: NotificationConfig,
        message: str,
        transport: NotificationTransport,
) -> None:
    """Deliver *message* through the one configured provider.

    Disabled notifications, unsupported providers and incomplete routing
    settings are silent no-ops. Delivery failures are logged as warnings
    and never raised.
    """
    if not config.enabled:
        return

    channel = get_channel(config)
    if channel is None:
        return

    payload = channel.build_payload(message)
    if payload is None:
        log.debug("notification_skipped", provider=channel.provider.value)
        return

    try:
        await channel.send(transport, payload)
    except DeliveryError as exc:
        log.warning(str(exc), provider=channel.provider.value)
