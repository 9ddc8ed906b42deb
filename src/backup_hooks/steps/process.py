"""Local command execution via asyncio subprocesses."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class CommandResult:
    """Result of a finished command."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class CommandRunner(Protocol):
    """Anything that can run a shell command and wait for it."""

    async def run_command(self, cmd: str) -> CommandResult:
        """Run a command and wait for completion."""
        ...


class LocalRunner:
    """Runs commands on this machine.

    No timeout is applied; a hanging command stalls the calling step.
    """

    async def run_command(self, cmd: str) -> CommandResult:
        """Run a command and wait for completion.

        Args:
            cmd: Shell command to execute

        Returns:
            CommandResult with exit code, stdout, and stderr
        """
        proc = await asyncio.create_subprocess_shell(
            cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        return CommandResult(
            exit_code=proc.returncode or 0,
            stdout=stdout.decode(errors="replace") if stdout else "",
            stderr=stderr.decode(errors="replace") if stderr else "",
        )
