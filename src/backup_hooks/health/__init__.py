"""Storage health checks against the host registry."""

from __future__ import annotations

from backup_hooks.health.checker import classify, evaluate
from backup_hooks.health.registry import (
    HostRegistry,
    HttpRegistry,
    LocalHostRegistry,
    StaticRegistry,
)

__all__ = [
    "HostRegistry",
    "HttpRegistry",
    "LocalHostRegistry",
    "StaticRegistry",
    "classify",
    "evaluate",
]
