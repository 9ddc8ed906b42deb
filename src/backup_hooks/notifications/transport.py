"""Notification transports."""

from __future__ import annotations

from typing import Any

import httpx

from backup_hooks.core.exceptions import DeliveryError
from backup_hooks.logging import get_logger

log = get_logger(__name__)


class HttpTransport:
    """POST payloads to provider adapter instances through the runtime's REST bridge."""

    def __init__(
            self,
            base_url: str,
            token: str | None = None,
            timeout: float = 30.0,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    async def send(self, instance: str, command: str, payload: dict[str, Any]) -> None:
        """POST ``{"command", "message"}`` to ``/v1/sendto/<instance>``."""
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            async with httpx.AsyncClient(
                    base_url=self.base_url,
                    headers=headers,
                    timeout=self.timeout,
                    transport=self._transport,
            ) as client:
                response = await client.post(
                    f"/v1/sendto/{instance}",
                    json={"command": command, "message": payload},
                )
                response.raise_for_status()
            log.info("notification_sent", instance=instance, command=command)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Sending to {instance} failed: {exc}") from exc


class RecordingTransport:
    """Keeps every payload in memory instead of delivering it."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []

    async def send(self, instance: str, command: str, payload: dict[str, Any]) -> None:
        self.sent.append((instance, command, payload))
