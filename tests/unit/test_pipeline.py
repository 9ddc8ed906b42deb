"""Tests for the post-backup pipeline."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from backup_hooks.core.context import JobContext
from backup_hooks.core.exceptions import ConfigError, ExecutionError
from backup_hooks.core.models import (
    AppConfig,
    MountOptions,
    NotificationConfig,
    StepStatus,
    StorageConfig,
)
from backup_hooks.health.registry import StaticRegistry
from backup_hooks.notifications.transport import RecordingTransport
from backup_hooks.pipeline import (
    STEP_POLICIES,
    PostBackupPipeline,
    StepPolicy,
    job_failed,
    summarize,
)

RegistryFactory = Callable[..., StaticRegistry]


def _config(*, network: bool = True, mount: MountOptions | None = None) -> AppConfig:
    return AppConfig(
        storage=StorageConfig(network_enabled=network),
        mount=mount or MountOptions(
            mount="/backups", mount_type="CIFS", backup_dir=Path("/mnt/nas"),
        ),
        notification=NotificationConfig(
            enabled=True, provider="WhatsApp", whatsapp_instance="whatsapp-cmb.0",
        ),
    )


@pytest.fixture()
def transfer() -> AsyncMock:
    return AsyncMock(return_value=None)


class TestPolicies:
    def test_umount_failures_are_ignored(self) -> None:
        assert STEP_POLICIES["umount"] == StepPolicy.IGNORE
        assert STEP_POLICIES["transfer"] == StepPolicy.FATAL

    def test_policy_table(self) -> None:
        assert STEP_POLICIES == {
            "storage_check": StepPolicy.FATAL,
            "transfer": StepPolicy.FATAL,
            "umount": StepPolicy.IGNORE,
        }

    def test_hard_failure_of_ignored_step_does_not_fail_job(self) -> None:
        ctx = JobContext()
        ctx.record_error("umount", ConfigError("x"), status=StepStatus.HARD_FAILURE)
        assert not job_failed(ctx)

    def test_soft_failure_never_fails_job(self) -> None:
        ctx = JobContext()
        ctx.record_error("transfer", ExecutionError("x"))
        assert not job_failed(ctx)

    def test_unknown_step_defaults_to_fatal(self) -> None:
        ctx = JobContext()
        ctx.record_error("compress", ExecutionError("x"), status=StepStatus.HARD_FAILURE)
        assert job_failed(ctx)

    def test_summary_mentions_warnings(self) -> None:
        ctx = JobContext()
        ctx.record_success("transfer")
        ctx.record_error("umount", ExecutionError("target is busy"))
        text = summarize(ctx)
        assert text.startswith("Backup completed successfully.")
        assert "umount: target is busy" in text


class TestPipeline:
    async def test_successful_network_job(
            self,
            registry_factory: RegistryFactory,
            transfer: AsyncMock,
            ok_runner: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        pipeline = PostBackupPipeline(
            _config(), registry_factory(5000), transport, runner=ok_runner, grace_delay=0,
        )
        ctx = await pipeline.run(transfer, job_id="job-1")

        transfer.assert_awaited_once()
        ok_runner.run_command.assert_awaited_once_with("umount /mnt/nas")
        assert ctx.job_id == "job-1"
        assert ctx.done == ["storage_check", "transfer", "umount"]
        assert not job_failed(ctx)
        assert len(transport.sent) == 1
        instance, command, payload = transport.sent[0]
        assert (instance, command) == ("whatsapp-cmb.0", "send")
        assert payload["text"].startswith("BackItUp:\nBackup completed successfully.")

    async def test_failed_unmount_does_not_fail_job(
            self,
            registry_factory: RegistryFactory,
            transfer: AsyncMock,
            failing_runner: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        pipeline = PostBackupPipeline(
            _config(), registry_factory(5000), transport, runner=failing_runner, grace_delay=0,
        )
        ctx = await pipeline.run(transfer)

        assert "umount" in ctx.errors
        assert "umount" not in ctx.done
        assert not job_failed(ctx)
        assert "Warnings: umount" in transport.sent[0][2]["text"]

    async def test_missing_mount_is_recorded_but_ignored(
            self,
            registry_factory: RegistryFactory,
            transfer: AsyncMock,
            ok_runner: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        config = _config(mount=MountOptions(mount_type="CIFS", backup_dir=Path("/mnt/nas")))
        pipeline = PostBackupPipeline(
            config, registry_factory(5000), transport, runner=ok_runner, grace_delay=0,
        )
        ctx = await pipeline.run(transfer)

        ok_runner.run_command.assert_not_awaited()
        assert isinstance(ctx.errors["umount"], ConfigError)
        assert not job_failed(ctx)

    async def test_local_job_skips_unmount(
            self,
            registry_factory: RegistryFactory,
            transfer: AsyncMock,
            ok_runner: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        pipeline = PostBackupPipeline(
            _config(network=False), registry_factory(5000), transport, runner=ok_runner,
        )
        ctx = await pipeline.run(transfer)

        ok_runner.run_command.assert_not_awaited()
        assert ctx.done == ["storage_check", "transfer"]

    async def test_low_space_blocks_local_transfer(
            self,
            registry_factory: RegistryFactory,
            transfer: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        pipeline = PostBackupPipeline(_config(network=False), registry_factory(300), transport)
        ctx = await pipeline.run(transfer)

        transfer.assert_not_awaited()
        assert job_failed(ctx)
        assert "storage_check" in ctx.errors
        assert transport.sent[0][2]["text"].startswith("BackItUp:\nBackup failed!")

    async def test_unknown_disk_state_proceeds(
            self,
            transfer: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        pipeline = PostBackupPipeline(_config(network=False), StaticRegistry(), transport)
        ctx = await pipeline.run(transfer)

        transfer.assert_awaited_once()
        assert ctx.done == ["transfer"]

    async def test_transfer_error_fails_job_and_still_unmounts(
            self,
            registry_factory: RegistryFactory,
            ok_runner: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        transfer = AsyncMock(side_effect=OSError("disk full"))
        pipeline = PostBackupPipeline(
            _config(), registry_factory(5000), transport, runner=ok_runner, grace_delay=0,
        )
        ctx = await pipeline.run(transfer)

        assert job_failed(ctx)
        assert ctx.done == ["storage_check", "umount"]
        assert "transfer: disk full" in transport.sent[0][2]["text"]

    async def test_notification_flags(
            self,
            registry_factory: RegistryFactory,
            transfer: AsyncMock,
            transport: RecordingTransport,
    ) -> None:
        config = _config(network=False)
        config.notification.notify_on_success = False
        pipeline = PostBackupPipeline(config, registry_factory(5000), transport)
        await pipeline.run(transfer)
        assert transport.sent == []

    async def test_broken_transport_does_not_fail_pipeline(
            self,
            registry_factory: RegistryFactory,
            transfer: AsyncMock,
    ) -> None:
        transport = AsyncMock()
        transport.send = AsyncMock(side_effect=RuntimeError("offline"))
        pipeline = PostBackupPipeline(_config(network=False), registry_factory(5000), transport)

        ctx = await pipeline.run(transfer)
        assert not job_failed(ctx)
        transport.send.assert_awaited_once()
