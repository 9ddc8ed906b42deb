"""Release a network-mounted backup target once a job is finished."""

from __future__ import annotations

import asyncio
import shlex

from backup_hooks.core.context import JobSink
from backup_hooks.core.exceptions import ConfigError, ExecutionError
from backup_hooks.core.models import MountOptions, StepResult, StepStatus
from backup_hooks.logging import get_logger
from backup_hooks.steps.process import CommandRunner, LocalRunner

log = get_logger(__name__)

STEP_NAME = "umount"
# Lets writers close their file handles before the share is detached.
GRACE_DELAY_SECONDS = 10.0


async def unmount(
        options: MountOptions,
        sink: JobSink,
        *,
        runner: CommandRunner | None = None,
        grace_delay: float = GRACE_DELAY_SECONDS,
) -> StepResult:
    """Detach the CIFS/NFS share at ``options.backup_dir``.

    Local targets pass straight through. For network targets the command is
    issued once after ``grace_delay`` seconds; failures are recorded in the
    job context and returned as a soft failure rather than raised.

    Raises:
        ConfigError: If no mount is configured, before any side effect.
    """
    if not options.mount:
        raise ConfigError("NO mount path specified!")

    if not options.is_network:
        log.debug("umount_skipped", mount_type=options.mount_type)
        return StepResult(step=STEP_NAME, status=StepStatus.SUCCESS)

    if options.backup_dir is None:
        raise ConfigError(f"No backup directory configured for {options.mount_type} mount")

    runner = runner or LocalRunner()
    cmd = f"umount {shlex.quote(str(options.backup_dir))}"

    await asyncio.sleep(grace_delay)

    try:
        result = await runner.run_command(cmd)
    except OSError as exc:
        error = ExecutionError(f"Could not run '{cmd}': {exc}")
        sink.record_error(STEP_NAME, error)
        log.error("umount_failed", command=cmd, error=str(exc))
        return StepResult(step=STEP_NAME, status=StepStatus.SOFT_FAILURE, error=str(error))

    if not result.success:
        error = ExecutionError(
            f"'{cmd}' exited with code {result.exit_code}",
            exit_code=result.exit_code,
            stderr=result.stderr,
        )
        sink.record_error(STEP_NAME, error)
        log.error(result.stderr.strip() or "umount_failed", command=cmd, exit_code=result.exit_code)
        return StepResult(
            step=STEP_NAME,
            status=StepStatus.SOFT_FAILURE,
            output=result.stdout,
            error=str(error),
        )

    sink.record_success(STEP_NAME)
    log.info("umount_complete", backup_dir=str(options.backup_dir))
    return StepResult(step=STEP_NAME, status=StepStatus.SUCCESS, output=result.stdout)
