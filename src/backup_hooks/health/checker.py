"""Free disk space check that gates local backups."""

from __future__ import annotations

from typing import Any

from backup_hooks.core.models import DiskHealthReport, DiskState, StorageConfig, StorageKind
from backup_hooks.health.registry import HostRegistry, adapter_object_id, disk_free_state_id
from backup_hooks.logging import get_logger

log = get_logger(__name__)


def classify(disk_free: float, error_threshold: float, warning_threshold: float) -> DiskState:
    """Map free MB onto ok / warn / error. A value equal to a threshold gets the worse state."""
    if disk_free > warning_threshold:
        return DiskState.OK
    if disk_free > error_threshold:
        return DiskState.WARN
    return DiskState.ERROR


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


async def _lookup_object(registry: HostRegistry, object_id: str) -> dict[str, Any] | None:
    try:
        return await registry.get_object(object_id)
    except Exception as exc:
        log.error("registry_lookup_failed", object_id=object_id, error=str(exc))
        return None


async def _lookup_state(registry: HostRegistry, state_id: str) -> dict[str, Any] | None:
    try:
        return await registry.get_state(state_id)
    except Exception as exc:
        log.error("registry_lookup_failed", state_id=state_id, error=str(exc))
        return None


async def evaluate(
        storage: StorageConfig,
        registry: HostRegistry,
        *,
        adapter_name: str = "backitup",
        instance: int = 0,
) -> DiskHealthReport | None:
    """Check the adapter host's free disk space against the configured thresholds.

    Args:
        storage: Storage settings (thresholds and whether the target is a NAS).
        registry: Where the adapter object and host metrics are read from.
        adapter_name: Adapter whose host is checked.
        instance: Adapter instance number.

    Returns:
        A fresh DiskHealthReport, or None when the host or its free space
        cannot be resolved. Lookup errors are logged, never raised.
    """
    adapter = await _lookup_object(registry, adapter_object_id(adapter_name, instance))
    host = ((adapter or {}).get("common") or {}).get("host")
    if not host:
        return None

    state = await _lookup_state(registry, disk_free_state_id(host))
    disk_free = _as_number((state or {}).get("val"))
    if not disk_free:
        return None

    error_threshold = storage.thresholds.file_size_error
    warning_threshold = storage.thresholds.file_size_warning
    disk_state = classify(disk_free, error_threshold, warning_threshold)

    report = DiskHealthReport(
        disk_state=disk_state,
        disk_free=disk_free,
        storage=StorageKind.NAS if storage.network_enabled else StorageKind.LOCAL,
        ready=storage.network_enabled or disk_free > error_threshold,
    )

    if disk_state == DiskState.WARN:
        log.warning(
            f'On the host "{host}" only {disk_free} MB free space is available! '
            "Please check your system!",
            host=host,
            disk_free=disk_free,
        )
    elif disk_state == DiskState.ERROR:
        log.error(
            f'On the host "{host}" only {disk_free} MB free space is available! '
            "Local backups are currently not possible. Please check your system!",
            host=host,
            disk_free=disk_free,
        )

    return report
