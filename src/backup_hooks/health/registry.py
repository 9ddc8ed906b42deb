"""Host registry clients.

The registry is the automation runtime's object/state store. Objects are
looked up by id (``system.adapter.<name>.<instance>``) and states carry a
``val`` (``system.host.<hostname>.diskFree``).
"""

from __future__ import annotations

import shutil
import socket
from pathlib import Path
from typing import Any, Protocol

import httpx

from backup_hooks.core.exceptions import RegistryError

_MB = 1024 * 1024


def adapter_object_id(adapter_name: str, instance: int) -> str:
    return f"system.adapter.{adapter_name}.{instance}"


def disk_free_state_id(hostname: str) -> str:
    return f"system.host.{hostname}.diskFree"


class HostRegistry(Protocol):
    """Async key-value reads against the host registry."""

    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        """Return the object stored under *object_id*, or None."""
        ...

    async def get_state(self, state_id: str) -> dict[str, Any] | None:
        """Return the state stored under *state_id* (a dict with ``val``), or None."""
        ...


class StaticRegistry:
    """In-memory registry, for embedding callers that already hold the values."""

    def __init__(
            self,
            objects: dict[str, dict[str, Any]] | None = None,
            states: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self.objects = objects or {}
        self.states = states or {}

    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        return self.objects.get(object_id)

    async def get_state(self, state_id: str) -> dict[str, Any] | None:
        return self.states.get(state_id)


class LocalHostRegistry:
    """Answers registry reads for this machine from the local filesystem."""

    def __init__(self, path: Path, hostname: str | None = None) -> None:
        self.path = path
        self.hostname = hostname or socket.gethostname()

    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        if not object_id.startswith("system.adapter."):
            return None
        return {"_id": object_id, "common": {"host": self.hostname}}

    async def get_state(self, state_id: str) -> dict[str, Any] | None:
        if state_id != disk_free_state_id(self.hostname):
            return None
        try:
            usage = shutil.disk_usage(self.path)
        except OSError as exc:
            raise RegistryError(f"Cannot read disk usage of {self.path}: {exc}") from exc
        return {"val": usage.free // _MB, "ack": True}


class HttpRegistry:
    """Reads objects and states through the runtime's REST bridge."""

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

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _get(self, path: str) -> dict[str, Any] | None:
        try:
            async with self._client() as client:
                response = await client.get(path)
                if response.status_code == httpx.codes.NOT_FOUND:
                    return None
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RegistryError(f"Registry request {path} failed: {exc}") from exc
        return data if isinstance(data, dict) else None

    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        return await self._get(f"/v1/object/{object_id}")

    async def get_state(self, state_id: str) -> dict[str, Any] | None:
        return await self._get(f"/v1/state/{state_id}")
