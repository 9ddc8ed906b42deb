"""Per-job execution context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from backup_hooks.core.models import StepStatus


class JobSink(Protocol):
    """Write-only view of a job context handed to steps."""

    def record_success(self, step: str) -> None: ...

    def record_error(self, step: str, error: Exception, *, status: StepStatus = ...) -> None: ...


@dataclass(frozen=True)
class StepEvent:
    """One entry in a job's event log."""

    step: str
    status: StepStatus
    error: Exception | None = None


@dataclass
class JobContext:
    """Append-only log of step outcomes for a single job.

    Created at job start and discarded at job end. ``done`` and ``errors``
    are derived from the log for the final reporting stage.
    """

    job_id: str = ""
    _events: list[StepEvent] = field(default_factory=list, repr=False)

    def record_success(self, step: str) -> None:
        self._events.append(StepEvent(step=step, status=StepStatus.SUCCESS))

    def record_error(
            self,
            step: str,
            error: Exception,
            *,
            status: StepStatus = StepStatus.SOFT_FAILURE,
    ) -> None:
        self._events.append(StepEvent(step=step, status=status, error=error))

    @property
    def events(self) -> tuple[StepEvent, ...]:
        return tuple(self._events)

    @property
    def done(self) -> list[str]:
        """Step names completed successfully, in execution order."""
        return [e.step for e in self._events if e.status == StepStatus.SUCCESS]

    @property
    def errors(self) -> dict[str, Exception]:
        """Last error recorded per step name."""
        return {e.step: e.error for e in self._events if e.error is not None}
