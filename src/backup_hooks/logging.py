"""Structured logging for backup-hooks.

Everything goes through structlog on top of stdlib logging. The console gets
either a human-friendly or a JSON rendering. The optional job log file always
gets one ``[LEVEL] timestamp event key=value`` line per record, which is the
layout ``backup-hooks logs`` colours by level.
"""

from __future__ import annotations

import logging
import logging.handlers
import re
import sys
from pathlib import Path

import structlog

from backup_hooks.core.models import LogFormat

REDACTED = "***REDACTED***"

# Field names whose whole value is hidden (bridge_token, smb_password, ...)
_SECRET_FIELDS = ("password", "secret", "token", "authorization", "credentials")

# mount option strings such as "username=bob,password=hunter2"
_MOUNT_PASSWORD = re.compile(r"\b(pass(?:word)?)=[^,\s]+", re.IGNORECASE)

# Chatty libraries used by the registry and transport clients
_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")

_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5


def _redact_sensitive(
        _logger: logging.Logger,
        _method: str,
        event_dict: dict,
) -> dict:
    """Hide secret fields and passwords embedded in mount options or commands."""
    for key, value in event_dict.items():
        if any(name in key.lower() for name in _SECRET_FIELDS):
            event_dict[key] = REDACTED
        elif isinstance(value, str) and "=" in value:
            event_dict[key] = _MOUNT_PASSWORD.sub(rf"\1={REDACTED}", value)
    return event_dict


def _file_renderer(_logger: logging.Logger, _method: str, event_dict: dict) -> str:
    level = str(event_dict.pop("level", "info")).upper()
    if level == "WARNING":
        level = "WARN"
    timestamp = event_dict.pop("timestamp", "")
    event = event_dict.pop("event", "")
    extras = " ".join(f"{k}={v}" for k, v in event_dict.items())
    return f"[{level}] {timestamp} {event} {extras}".rstrip()


def _formatter(renderer: structlog.types.Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def _job_log_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setFormatter(_formatter(_file_renderer))
    return handler


def setup_logging(
        level: str = "INFO",
        log_file: Path | None = None,
        log_format: LogFormat = LogFormat.CONSOLE,
) -> None:
    """Configure structlog and the root logger.

    Args:
        level: Log level name for the console and the job log.
        log_file: Job log path. Parent directories are created.
        log_format: Console rendering, ``console`` or ``json``.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            _redact_sensitive,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if log_format == LogFormat.JSON:
        console_renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_formatter(console_renderer))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    if log_file:
        root_logger.addHandler(_job_log_handler(log_file))
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog bound logger."""
    return structlog.get_logger(name)
