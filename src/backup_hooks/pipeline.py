"""Post-backup pipeline: storage gate, transfer, unmount and notification."""

from __future__ import annotations

import enum
import uuid
from collections.abc import Awaitable, Callable

from backup_hooks.core.context import JobContext
from backup_hooks.core.exceptions import ConfigError, ExecutionError
from backup_hooks.core.models import AppConfig, StepStatus
from backup_hooks.health.checker import evaluate
from backup_hooks.health.registry import HostRegistry
from backup_hooks.logging import get_logger
from backup_hooks.notifications.base import NotificationTransport
from backup_hooks.notifications.dispatcher import dispatch
from backup_hooks.steps.process import CommandRunner
from backup_hooks.steps.umount import GRACE_DELAY_SECONDS, unmount

log = get_logger(__name__)

Transfer = Callable[[], Awaitable[object]]


class StepPolicy(enum.StrEnum):
    """What a hard failure of a step means for the job."""

    FATAL = "fatal"
    IGNORE = "ignore"


STEP_POLICIES: dict[str, StepPolicy] = {
    "storage_check": StepPolicy.FATAL,
    "transfer": StepPolicy.FATAL,
    "umount": StepPolicy.IGNORE,
}


def job_failed(context: JobContext) -> bool:
    """True if any step with a fatal policy ended in a hard failure."""
    return any(
        event.status == StepStatus.HARD_FAILURE
        and STEP_POLICIES.get(event.step, StepPolicy.FATAL) == StepPolicy.FATAL
        for event in context.events
    )


def summarize(context: JobContext) -> str:
    """Build the human-readable status line sent to the user."""
    if job_failed(context):
        details = "; ".join(f"{step}: {err}" for step, err in context.errors.items())
        return f"Backup failed! {details}"
    text = "Backup completed successfully."
    if context.errors:
        details = "; ".join(f"{step}: {err}" for step, err in context.errors.items())
        text += f" Warnings: {details}"
    return text


class PostBackupPipeline:
    """Runs one backup job's external steps in their fixed order."""

    def __init__(
            self,
            config: AppConfig,
            registry: HostRegistry,
            transport: NotificationTransport,
            runner: CommandRunner | None = None,
            grace_delay: float = GRACE_DELAY_SECONDS,
    ) -> None:
        self.config = config
        self.registry = registry
        self.transport = transport
        self.runner = runner
        self.grace_delay = grace_delay

    async def run(self, transfer: Transfer, *, job_id: str | None = None) -> JobContext:
        """Execute the job and return its context for reporting.

        Args:
            transfer: Coroutine function performing the actual backup or restore.
            job_id: Optional identifier, generated when omitted.
        """
        context = JobContext(job_id=job_id or uuid.uuid4().hex[:12])
        bound = log.bind(job_id=context.job_id)

        if await self._check_storage(context):
            try:
                await transfer()
            except Exception as exc:
                bound.error("transfer_failed", error=str(exc))
                context.record_error("transfer", exc, status=StepStatus.HARD_FAILURE)
            else:
                context.record_success("transfer")

        if self.config.storage.network_enabled:
            try:
                await unmount(
                    self.config.mount,
                    context,
                    runner=self.runner,
                    grace_delay=self.grace_delay,
                )
            except ConfigError as exc:
                bound.error("umount_not_configured", error=str(exc))
                context.record_error("umount", exc, status=StepStatus.HARD_FAILURE)

        failed = job_failed(context)
        notification = self.config.notification
        if (failed and notification.notify_on_failure) or (
                not failed and notification.notify_on_success
        ):
            await dispatch(notification, summarize(context), self.transport)

        bound.info("job_finished", failed=failed, done=context.done)
        return context

    async def _check_storage(self, context: JobContext) -> bool:
        """Gate the transfer on free space. An unknown state lets the job proceed."""
        report = await evaluate(
            self.config.storage,
            self.registry,
            adapter_name=self.config.registry.adapter_name,
            instance=self.config.registry.instance,
        )
        if report is None:
            log.warning("storage_check_unavailable", job_id=context.job_id)
            return True
        if not report.ready:
            context.record_error(
                "storage_check",
                ExecutionError(f"Only {report.disk_free} MB free space available"),
                status=StepStatus.HARD_FAILURE,
            )
            return False
        context.record_success("storage_check")
        return True
