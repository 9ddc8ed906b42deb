"""Main Typer application entry point for backup-hooks CLI."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from backup_hooks import __version__
from backup_hooks.cli.config_cmd import config_app
from backup_hooks.core.config import LOG_FILE, ensure_dirs, load_config
from backup_hooks.core.exceptions import ConfigError
from backup_hooks.core.models import AppConfig, DiskState, LogFormat, StorageThresholds
from backup_hooks.logging import setup_logging
from backup_hooks.steps.umount import GRACE_DELAY_SECONDS

app = typer.Typer(
    name="backup-hooks",
    help="Storage checks, unmounting and notifications around backup jobs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)
app.add_typer(config_app, name="config", help="Configuration management")

console = Console()

_STATE_STYLE = {
    DiskState.OK: "green",
    DiskState.WARN: "yellow",
    DiskState.ERROR: "red",
}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"backup-hooks {__version__}")
        raise typer.Exit()


def _load(config_path: Path | None) -> AppConfig:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


@app.callback()
def main_callback(
        version: bool = typer.Option(
            False,
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose (DEBUG) logging.",
        ),
        log_json: bool = typer.Option(
            False,
            "--log-json",
            help="Output logs in JSON format.",
        ),
) -> None:
    """backup-hooks: post-backup storage checks, unmount and notifications."""
    ensure_dirs()
    level = "DEBUG" if verbose else "INFO"
    fmt = LogFormat.JSON if log_json else LogFormat.CONSOLE
    setup_logging(level=level, log_file=LOG_FILE, log_format=fmt)


# ──────────────────── check-storage ──────────────────────


@app.command("check-storage")
def check_storage(
        path: Path | None = typer.Option(
            None, "--path", help="Filesystem to measure when no bridge is used."
        ),
        bridge_url: str | None = typer.Option(
            None, "--bridge-url", help="REST bridge of the automation runtime.",
            envvar="BACKUP_HOOKS_BRIDGE_URL",
        ),
        network: bool | None = typer.Option(
            None, "--network/--local", help="Backups go to network storage."
        ),
        error_mb: float | None = typer.Option(None, "--error-mb", help="Error threshold (MB)."),
        warning_mb: float | None = typer.Option(
            None, "--warning-mb", help="Warning threshold (MB)."
        ),
        config_path: Path | None = typer.Option(None, "--config", help="Config file."),
) -> None:
    """Check whether the host has enough free space for a local backup."""
    from backup_hooks.health import HttpRegistry, LocalHostRegistry, evaluate
    from backup_hooks.health.registry import HostRegistry

    config = _load(config_path)
    storage = config.storage.model_copy(deep=True)
    if network is not None:
        storage.network_enabled = network
    if path is not None:
        storage.local_path = path
    if error_mb is not None or warning_mb is not None:
        current = storage.thresholds
        storage.thresholds = StorageThresholds(
            file_size_error=current.file_size_error if error_mb is None else error_mb,
            file_size_warning=current.file_size_warning if warning_mb is None else warning_mb,
        )

    url = bridge_url or config.registry.bridge_url
    registry: HostRegistry
    if url:
        token = config.registry.bridge_token
        registry = HttpRegistry(
            url,
            token=token.get_secret_value() if token else None,
            timeout=config.registry.timeout,
        )
    else:
        registry = LocalHostRegistry(storage.local_path)

    report = asyncio.run(
        evaluate(
            storage,
            registry,
            adapter_name=config.registry.adapter_name,
            instance=config.registry.instance,
        )
    )
    if report is None:
        console.print("[yellow]Free disk space could not be determined.[/yellow]")
        return

    style = _STATE_STYLE[report.disk_state]
    table = Table(title="Storage Health", show_lines=False)
    table.add_column("State")
    table.add_column("Free (MB)", justify="right")
    table.add_column("Storage")
    table.add_column("Ready")
    table.add_row(
        f"[{style}]{report.disk_state.value}[/{style}]",
        f"{report.disk_free:g}",
        report.storage.value,
        "[green]yes[/green]" if report.ready else "[red]no[/red]",
    )
    console.print(table)

    if not report.ready:
        raise typer.Exit(code=1)


# ──────────────────── umount ─────────────────────────────


@app.command("umount")
def umount_cmd(
        mount: str | None = typer.Option(None, "--mount", help="Configured mount source."),
        mount_type: str | None = typer.Option(None, "--mount-type", help="CIFS or NFS."),
        backup_dir: Path | None = typer.Option(None, "--backup-dir", help="Mounted directory."),
        grace_delay: float = typer.Option(
            GRACE_DELAY_SECONDS, "--grace-delay", help="Seconds to wait before unmounting."
        ),
        config_path: Path | None = typer.Option(None, "--config", help="Config file."),
) -> None:
    """Release a CIFS/NFS backup mount."""
    from backup_hooks.core.context import JobContext
    from backup_hooks.steps import unmount

    config = _load(config_path)
    options = config.mount.model_copy(
        update={
            k: v
            for k, v in {
                "mount": mount,
                "mount_type": mount_type.upper() if mount_type else None,
                "backup_dir": backup_dir,
            }.items()
            if v is not None
        }
    )

    context = JobContext()
    try:
        with console.status(f"[bold blue]Waiting {grace_delay:g}s before unmounting..."):
            result = asyncio.run(unmount(options, context, grace_delay=grace_delay))
    except ConfigError as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(code=2) from exc

    if result.ok:
        console.print("[green]✓[/green] Unmount step finished")
        if result.output:
            console.print(result.output.rstrip())
    else:
        console.print(f"[red]✗[/red] {result.error}")
        raise typer.Exit(code=1)


# ──────────────────── notify ─────────────────────────────


@app.command("notify")
def notify(
        message: str = typer.Argument(..., help="Status text to send."),
        dry_run: bool = typer.Option(
            False, "--dry-run", help="Print the request instead of sending it."
        ),
        config_path: Path | None = typer.Option(None, "--config", help="Config file."),
) -> None:
    """Send a status message through the configured notification provider."""
    from backup_hooks.notifications import HttpTransport, RecordingTransport, dispatch
    from backup_hooks.notifications.base import NotificationTransport

    config = _load(config_path)
    transport: NotificationTransport
    if dry_run:
        transport = RecordingTransport()
    elif config.registry.bridge_url:
        token = config.registry.bridge_token
        transport = HttpTransport(
            config.registry.bridge_url,
            token=token.get_secret_value() if token else None,
            timeout=config.registry.timeout,
        )
    else:
        console.print("[red]No bridge URL configured (BACKUP_HOOKS_BRIDGE_URL).[/red]")
        raise typer.Exit(code=1)

    asyncio.run(dispatch(config.notification, message, transport))

    if isinstance(transport, RecordingTransport):
        if not transport.sent:
            console.print("[yellow]Nothing would be sent with the current configuration.[/yellow]")
        for instance, command, payload in transport.sent:
            console.print(f"[bold]{instance}[/bold] {command}")
            console.print_json(data=payload)


# ──────────────────── logs ───────────────────────────────


@app.command("logs")
def logs(
        path: Path | None = typer.Option(None, "--path", help="Log file to show."),
        lines: int = typer.Option(200, "--lines", "-n", help="Number of trailing lines."),
) -> None:
    """Show the job log with warnings and errors highlighted."""
    target = path or LOG_FILE
    if not target.exists():
        console.print(f"[yellow]No log file found at {target}.[/yellow]")
        raise typer.Exit()

    for line in target.read_text(encoding="utf-8").splitlines()[-lines:]:
        if line.startswith("[ERROR]"):
            console.print(line, style="red", markup=False, highlight=False)
        elif line.startswith("[WARN]"):
            console.print(line, style="dark_orange", markup=False, highlight=False)
        else:
            console.print(line, markup=False, highlight=False)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
