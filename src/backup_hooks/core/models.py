"""Pydantic models for backup-hooks configuration and results."""

from __future__ import annotations

import enum
from pathlib import Path

from pydantic import BaseModel, SecretStr, field_validator

DEFAULT_FILE_SIZE_ERROR = 512  # MB
DEFAULT_FILE_SIZE_WARNING = 1024  # MB


# ──────────────────────── Enums ──────────────────────────


class MountType(enum.StrEnum):
    """Network filesystems that need to be released after a job."""

    CIFS = "CIFS"
    NFS = "NFS"


class DiskState(enum.StrEnum):
    """Health classification of the host's free disk space."""

    OK = "ok"
    WARN = "warn"
    ERROR = "error"


class StorageKind(enum.StrEnum):
    """Where backups are written."""

    NAS = "nas"
    LOCAL = "local"


class NotificationProvider(enum.StrEnum):
    """Supported notification channels, keyed by their configuration name."""

    TELEGRAM = "Telegram"
    EMAIL = "E-Mail"
    PUSHOVER = "Pushover"
    WHATSAPP = "WhatsApp"
    SIGNAL = "Signal"
    MATRIX = "Matrix"
    DISCORD = "Discord"


class StepStatus(enum.StrEnum):
    """Outcome of a single pipeline step."""

    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"
    HARD_FAILURE = "hard_failure"


class LogFormat(enum.StrEnum):
    """Structured log output format."""

    CONSOLE = "console"
    JSON = "json"


# ──────────────────── Config Models ──────────────────────


class StorageThresholds(BaseModel):
    """Free space limits in MB. Missing or zero values fall back to defaults."""

    file_size_error: float = DEFAULT_FILE_SIZE_ERROR
    file_size_warning: float = DEFAULT_FILE_SIZE_WARNING

    @field_validator("file_size_error", mode="before")
    @classmethod
    def default_error(cls, v: float | None) -> float:
        return v or DEFAULT_FILE_SIZE_ERROR

    @field_validator("file_size_warning", mode="before")
    @classmethod
    def default_warning(cls, v: float | None) -> float:
        return v or DEFAULT_FILE_SIZE_WARNING


class StorageConfig(BaseModel):
    """Backup destination settings."""

    network_enabled: bool = False
    local_path: Path = Path("/")  # measured by the local host registry
    thresholds: StorageThresholds = StorageThresholds()


class MountOptions(BaseModel):
    """Per-job mount settings consumed by the unmount step."""

    mount: str | None = None
    mount_type: str | None = None  # CIFS, NFS or anything else for local targets
    backup_dir: Path | None = None

    @property
    def is_network(self) -> bool:
        return self.mount_type in (MountType.CIFS, MountType.NFS)


class NotificationConfig(BaseModel):
    """Notification settings. Exactly one provider is active at a time."""

    enabled: bool = False
    provider: str | None = None
    notify_on_success: bool = True
    notify_on_failure: bool = True

    telegram_instance: str | None = None
    telegram_user: str | None = None
    telegram_silent: bool = False

    email_instance: str | None = None
    email_receiver: str | None = None
    email_sender: str | None = None

    pushover_instance: str | None = None
    pushover_device_id: str | None = None
    pushover_silent: bool | str = False  # older configs store "true"/"false"

    whatsapp_instance: str | None = None
    signal_instance: str | None = None
    matrix_instance: str | None = None

    discord_instance: str | None = None
    discord_target: str | None = None  # "<userId>" or "<serverId>/<channelId>"


class RegistryConfig(BaseModel):
    """How to reach the host automation runtime."""

    adapter_name: str = "backitup"
    instance: int = 0
    bridge_url: str | None = None
    bridge_token: SecretStr | None = None
    timeout: float = 30.0


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    log_file: Path | None = None
    format: LogFormat = LogFormat.CONSOLE


class AppConfig(BaseModel):
    """Top-level application configuration."""

    storage: StorageConfig = StorageConfig()
    mount: MountOptions = MountOptions()
    notification: NotificationConfig = NotificationConfig()
    registry: RegistryConfig = RegistryConfig()
    logging: LoggingConfig = LoggingConfig()


# ──────────────────── Result Models ──────────────────────


class DiskHealthReport(BaseModel):
    """Verdict of a storage health check."""

    disk_state: DiskState
    disk_free: float  # MB, as reported by the host
    storage: StorageKind
    ready: bool


class StepResult(BaseModel):
    """Structured outcome returned by a pipeline step."""

    step: str
    status: StepStatus
    output: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == StepStatus.SUCCESS
