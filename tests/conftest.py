"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from backup_hooks.core.context import JobContext
from backup_hooks.core.models import (
    MountOptions,
    NotificationConfig,
    StorageConfig,
    StorageThresholds,
)
from backup_hooks.health.registry import StaticRegistry
from backup_hooks.notifications.transport import RecordingTransport
from backup_hooks.steps.process import CommandResult

HOSTNAME = "nas-host"


@pytest.fixture()
def job_context() -> JobContext:
    return JobContext(job_id="test-job")


@pytest.fixture()
def cifs_options() -> MountOptions:
    """Mount options of a CIFS-backed job."""
    return MountOptions(mount="/backups", mount_type="CIFS", backup_dir=Path("/mnt/nas"))


@pytest.fixture()
def ok_runner() -> AsyncMock:
    """A command runner whose commands always succeed."""
    runner = AsyncMock()
    runner.run_command = AsyncMock(
        return_value=CommandResult(exit_code=0, stdout="unmounted\n", stderr="")
    )
    return runner


@pytest.fixture()
def failing_runner() -> AsyncMock:
    """A command runner whose commands exit non-zero."""
    runner = AsyncMock()
    runner.run_command = AsyncMock(
        return_value=CommandResult(exit_code=32, stdout="", stderr="umount: /mnt/nas: not mounted.")
    )
    return runner


@pytest.fixture()
def local_storage() -> StorageConfig:
    return StorageConfig(
        network_enabled=False,
        thresholds=StorageThresholds(file_size_error=512, file_size_warning=1024),
    )


def make_registry(disk_free: object, hostname: str = HOSTNAME) -> StaticRegistry:
    """Registry answering for the default backitup.0 instance on *hostname*."""
    return StaticRegistry(
        objects={"system.adapter.backitup.0": {"common": {"host": hostname}}},
        states={f"system.host.{hostname}.diskFree": {"val": disk_free}},
    )


@pytest.fixture()
def registry_factory():
    return make_registry


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def discord_config() -> NotificationConfig:
    return NotificationConfig(
        enabled=True,
        provider="Discord",
        discord_instance="discord.0",
        discord_target="123456",
    )
