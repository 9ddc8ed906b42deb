"""Abstract base class for notification channels."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, ClassVar, Protocol

from backup_hooks.core.exceptions import DeliveryError
from backup_hooks.core.models import NotificationConfig, NotificationProvider

MESSAGE_PREFIX = "BackItUp:\n"


class NotificationTransport(Protocol):
    """Delivers a payload to a provider adapter instance."""

    async def send(self, instance: str, command: str, payload: dict[str, Any]) -> None:
        """Hand *payload* to *instance* under *command* ("send" or "sendMessage")."""
        ...


@dataclass(frozen=True)
class Payload:
    """A provider-specific request, ready to be handed to the transport."""

    instance: str
    command: str
    params: dict[str, Any] = field(default_factory=dict)


class BaseChannel(abc.ABC):
    """Interface every notification provider implements.

    Routing fields come from the notification config only, never from the
    message text.
    """

    provider: ClassVar[NotificationProvider]
    command: ClassVar[str] = "send"

    def __init__(self, config: NotificationConfig) -> None:
        self.config = config

    @abc.abstractmethod
    def build_payload(self, message: str) -> Payload | None:
        """Build the request for *message*.

        Returns:
            The payload, or None when required routing fields are missing or
            malformed and the message should be skipped.
        """

    async def send(self, transport: NotificationTransport, payload: Payload) -> None:
        """Deliver a payload built by this channel.

        Raises:
            DeliveryError: If the transport fails for any reason.
        """
        try:
            await transport.send(payload.instance, payload.command, payload.params)
        except Exception as exc:
            raise DeliveryError(f"Error sending {self.provider.value} message: {exc}") from exc

    @staticmethod
    def format_text(message: str) -> str:
        return f"{MESSAGE_PREFIX}{message}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} provider={self.provider.value}>"
