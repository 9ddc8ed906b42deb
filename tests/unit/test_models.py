"""Tests for core models and the job context."""

from __future__ import annotations

from pathlib import Path

import pytest

from backup_hooks.core.context import JobContext, StepEvent
from backup_hooks.core.exceptions import ExecutionError
from backup_hooks.core.models import (
    AppConfig,
    DiskHealthReport,
    DiskState,
    MountOptions,
    StepResult,
    StepStatus,
    StorageKind,
    StorageThresholds,
)


class TestStorageThresholds:
    def test_defaults(self) -> None:
        t = StorageThresholds()
        assert t.file_size_error == 512
        assert t.file_size_warning == 1024

    @pytest.mark.parametrize("value", [0, None])
    def test_falsy_values_fall_back(self, value: float | None) -> None:
        t = StorageThresholds(file_size_error=value, file_size_warning=value)
        assert t.file_size_error == 512
        assert t.file_size_warning == 1024

    def test_inverted_thresholds_are_kept(self) -> None:
        t = StorageThresholds(file_size_error=2000, file_size_warning=100)
        assert (t.file_size_error, t.file_size_warning) == (2000, 100)


class TestMountOptions:
    @pytest.mark.parametrize(("mount_type", "expected"), [
        ("CIFS", True), ("NFS", True), (None, False), ("local", False), ("nfs", False),
    ])
    def test_is_network(self, mount_type: str | None, expected: bool) -> None:
        options = MountOptions(mount="/b", mount_type=mount_type, backup_dir=Path("/mnt"))
        assert options.is_network is expected


class TestResults:
    def test_step_result_ok(self) -> None:
        assert StepResult(step="umount", status=StepStatus.SUCCESS).ok
        assert not StepResult(step="umount", status=StepStatus.SOFT_FAILURE).ok

    def test_report_serialises_with_plain_values(self) -> None:
        report = DiskHealthReport(
            disk_state=DiskState.OK, disk_free=2000, storage=StorageKind.LOCAL, ready=True,
        )
        assert report.model_dump(mode="json") == {
            "disk_state": "ok",
            "disk_free": 2000.0,
            "storage": "local",
            "ready": True,
        }

    def test_app_config_defaults(self) -> None:
        config = AppConfig()
        assert config.notification.enabled is False
        assert config.storage.network_enabled is False
        assert config.registry.adapter_name == "backitup"


class TestJobContext:
    def test_done_keeps_order_and_duplicates(self) -> None:
        ctx = JobContext()
        ctx.record_success("mount")
        ctx.record_success("umount")
        ctx.record_success("umount")
        assert ctx.done == ["mount", "umount", "umount"]

    def test_errors_last_write_wins(self) -> None:
        ctx = JobContext()
        first, second = ExecutionError("first"), ExecutionError("second")
        ctx.record_error("umount", first)
        ctx.record_error("umount", second)
        assert ctx.errors == {"umount": second}
        assert ctx.done == []

    def test_events_are_read_only_snapshot(self) -> None:
        ctx = JobContext()
        ctx.record_success("transfer")
        events = ctx.events
        ctx.record_success("umount")
        assert events == (StepEvent(step="transfer", status=StepStatus.SUCCESS),)
        assert len(ctx.events) == 2

    def test_default_error_status_is_soft(self) -> None:
        ctx = JobContext()
        ctx.record_error("umount", ExecutionError("x"))
        assert ctx.events[0].status == StepStatus.SOFT_FAILURE

    def test_contexts_are_independent(self) -> None:
        a, b = JobContext(), JobContext()
        a.record_success("umount")
        assert b.done == []
