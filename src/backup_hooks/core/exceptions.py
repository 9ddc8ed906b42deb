"""Custom exceptions for backup-hooks."""


class BackupHooksError(Exception):
    """Base exception for all backup-hooks errors."""


class ConfigError(BackupHooksError):
    """Raised when configuration is invalid or a required value is missing."""


class ExecutionError(BackupHooksError):
    """Raised when an external process or transport call fails after being attempted."""

    def __init__(self, message: str, *, exit_code: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class DeliveryError(ExecutionError):
    """Raised when a notification could not be handed to its transport."""


class RegistryError(BackupHooksError):
    """Raised when the host registry cannot be reached."""
