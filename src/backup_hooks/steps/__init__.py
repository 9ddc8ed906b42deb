"""Post-backup pipeline steps."""

from __future__ import annotations

from backup_hooks.steps.process import CommandResult, CommandRunner, LocalRunner
from backup_hooks.steps.umount import GRACE_DELAY_SECONDS, unmount

__all__ = ["GRACE_DELAY_SECONDS", "CommandResult", "CommandRunner", "LocalRunner", "unmount"]
