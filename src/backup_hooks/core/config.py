"""Configuration loading and management for backup-hooks.

Configuration sources (highest to lowest priority):
  1. CLI arguments (passed directly)
  2. Environment variables (BACKUP_HOOKS_* prefix)
  3. Config file (~/.config/backup-hooks/config.toml)
  4. Defaults
"""

from __future__ import annotations

import contextlib
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError

from backup_hooks.core.exceptions import ConfigError
from backup_hooks.core.models import (
    AppConfig,
    LogFormat,
    LoggingConfig,
    MountOptions,
    NotificationConfig,
    RegistryConfig,
    StorageConfig,
)

# ──────────────────── Paths ──────────────────────────────

_APP_NAME = "backup-hooks"


def _get_config_dir() -> Path:
    """Return the platform-appropriate config directory."""
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / _APP_NAME


def _get_data_dir() -> Path:
    """Return the platform-appropriate data directory."""
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    else:
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / _APP_NAME


CONFIG_DIR = _get_config_dir()
DATA_DIR = _get_data_dir()
CONFIG_FILE = CONFIG_DIR / "config.toml"
LOG_DIR = DATA_DIR / "logs"
LOG_FILE = LOG_DIR / "backup-hooks.log"

# ──────────────────── Environment Loading ────────────────

_ENV_PREFIX = "BACKUP_HOOKS_"
_TRUTHY = ("true", "1", "yes")


def _env(key: str, default: str | None = None) -> str | None:
    """Read an environment variable with the BACKUP_HOOKS_ prefix."""
    return os.environ.get(f"{_ENV_PREFIX}{key}", default)


def _env_bool(key: str) -> bool | None:
    value = _env(key)
    if value is None:
        return None
    return value.lower() in _TRUTHY


def _load_storage_from_env() -> dict[str, Any]:
    """Load storage config overrides from environment."""
    overrides: dict[str, Any] = {}
    if (ne := _env_bool("NETWORK_STORAGE")) is not None:
        overrides["network_enabled"] = ne
    if lp := _env("STORAGE_LOCAL_PATH"):
        overrides["local_path"] = Path(lp)
    thresholds: dict[str, Any] = {}
    try:
        if fe := _env("FILE_SIZE_ERROR"):
            thresholds["file_size_error"] = float(fe)
        if fw := _env("FILE_SIZE_WARNING"):
            thresholds["file_size_warning"] = float(fw)
    except ValueError as exc:
        raise ConfigError(f"Invalid storage threshold in environment: {exc}") from exc
    if thresholds:
        overrides["thresholds"] = thresholds
    return overrides


def _load_mount_from_env() -> dict[str, Any]:
    """Load mount options from environment."""
    overrides: dict[str, Any] = {}
    if m := _env("MOUNT"):
        overrides["mount"] = m
    if mt := _env("MOUNT_TYPE"):
        overrides["mount_type"] = mt.upper()
    if bd := _env("BACKUP_DIR"):
        overrides["backup_dir"] = Path(bd)
    return overrides


def _load_notification_from_env() -> dict[str, Any]:
    """Load notification config overrides from environment."""
    overrides: dict[str, Any] = {}
    if (en := _env_bool("NOTIFICATIONS_ENABLED")) is not None:
        overrides["enabled"] = en
    if p := _env("NOTIFICATION_PROVIDER"):
        overrides["provider"] = p
    return overrides


def _load_registry_from_env() -> dict[str, Any]:
    """Load registry/bridge overrides from environment."""
    overrides: dict[str, Any] = {}
    if bu := _env("BRIDGE_URL"):
        overrides["bridge_url"] = bu
    if bt := _env("BRIDGE_TOKEN"):
        overrides["bridge_token"] = bt
    if inst := _env("INSTANCE"):
        try:
            overrides["instance"] = int(inst)
        except ValueError as exc:
            raise ConfigError(f"Invalid adapter instance in environment: {inst}") from exc
    return overrides


def _load_logging_from_env() -> dict[str, Any]:
    """Load logging config overrides from environment."""
    overrides: dict[str, Any] = {}
    if ll := _env("LOG_LEVEL"):
        overrides["level"] = ll.upper()
    if lf := _env("LOG_FILE"):
        overrides["log_file"] = Path(lf)
    if fmt := _env("LOG_FORMAT"):
        overrides["format"] = LogFormat(fmt.lower())
    return overrides


# ──────────────────── TOML File Loading ──────────────────


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load and return the raw TOML config dict. Returns empty dict if file missing."""
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc


def save_config_file(config: AppConfig, path: Path | None = None) -> Path:
    """Save AppConfig to a TOML file."""
    config_path = path or CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_toml_dict(config)
    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    # Restrict file permissions (Unix only)
    with contextlib.suppress(OSError):
        config_path.chmod(0o600)

    return config_path


def _config_to_toml_dict(config: AppConfig) -> dict[str, Any]:
    """Convert an AppConfig to a TOML-serialisable dict."""
    data: dict[str, Any] = {}

    storage_dict = config.storage.model_dump()
    storage_dict["local_path"] = str(config.storage.local_path)
    data["storage"] = storage_dict

    mount_dict = config.mount.model_dump(exclude_none=True)
    if config.mount.backup_dir:
        mount_dict["backup_dir"] = str(config.mount.backup_dir)
    data["mount"] = mount_dict

    data["notification"] = config.notification.model_dump(exclude_none=True)

    registry_dict = config.registry.model_dump(exclude_none=True)
    if config.registry.bridge_token:
        registry_dict["bridge_token"] = config.registry.bridge_token.get_secret_value()
    data["registry"] = registry_dict

    log_dict = config.logging.model_dump(exclude_none=True)
    log_dict["format"] = config.logging.format.value
    if config.logging.log_file:
        log_dict["log_file"] = str(config.logging.log_file)
    data["logging"] = log_dict

    return data


# ──────────────────── Main Loader ────────────────────────


def _section(raw: dict[str, Any], name: str, env: dict[str, Any]) -> dict[str, Any]:
    data = dict(raw.get(name, {}))
    if name == "storage" and "thresholds" in env:
        env = {**env, "thresholds": {**data.get("thresholds", {}), **env["thresholds"]}}
    data.update(env)
    return data


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the full application config (file + env overrides)."""
    raw = load_config_file(config_path)

    try:
        return AppConfig(
            storage=StorageConfig(**_section(raw, "storage", _load_storage_from_env())),
            mount=MountOptions(**_section(raw, "mount", _load_mount_from_env())),
            notification=NotificationConfig(
                **_section(raw, "notification", _load_notification_from_env())
            ),
            registry=RegistryConfig(**_section(raw, "registry", _load_registry_from_env())),
            logging=LoggingConfig(**_section(raw, "logging", _load_logging_from_env())),
        )
    except (ValidationError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def ensure_dirs() -> None:
    """Create required application directories if they don't exist."""
    for d in (CONFIG_DIR, DATA_DIR, LOG_DIR):
        d.mkdir(parents=True, exist_ok=True)
