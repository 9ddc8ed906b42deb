"""CLI config subcommands for managing backup-hooks configuration."""

from __future__ import annotations

from pathlib import Path

import click
import typer
from rich.console import Console
from rich.syntax import Syntax

from backup_hooks.core.models import (
    LogFormat,
    LoggingConfig,
    MountType,
    NotificationConfig,
    NotificationProvider,
    StorageThresholds,
)

config_app = typer.Typer(no_args_is_help=True, rich_markup_mode="rich")
console = Console()

# Routing settings asked for per provider: (field, prompt)
_PROVIDER_FIELDS: dict[NotificationProvider, list[tuple[str, str]]] = {
    NotificationProvider.TELEGRAM: [
        ("telegram_instance", "Telegram instance (e.g. telegram.0)"),
        ("telegram_user", "Telegram user (allTelegramUsers for everyone)"),
    ],
    NotificationProvider.EMAIL: [
        ("email_instance", "E-Mail instance (e.g. email.0)"),
        ("email_receiver", "Receiver address"),
        ("email_sender", "Sender address"),
    ],
    NotificationProvider.PUSHOVER: [
        ("pushover_instance", "Pushover instance (e.g. pushover.0)"),
        ("pushover_device_id", "Device ID"),
    ],
    NotificationProvider.WHATSAPP: [("whatsapp_instance", "WhatsApp instance")],
    NotificationProvider.SIGNAL: [("signal_instance", "Signal instance")],
    NotificationProvider.MATRIX: [("matrix_instance", "Matrix instance")],
    NotificationProvider.DISCORD: [
        ("discord_instance", "Discord instance (e.g. discord.0)"),
        ("discord_target", "Target (userId or serverId/channelId)"),
    ],
}


@config_app.command("init")
def config_init(
        path: Path | None = typer.Option(
            None, "--path", help="Custom config file location."
        ),
) -> None:
    """Create or update the configuration file interactively.

    If no --path is given, writes to the default location:
      macOS:  ~/Library/Application Support/backup-hooks/config.toml
      Linux:  ~/.config/backup-hooks/config.toml
    """
    from backup_hooks.core.config import CONFIG_FILE, save_config_file
    from backup_hooks.core.models import AppConfig, MountOptions, RegistryConfig, StorageConfig

    target = path or CONFIG_FILE

    if target.exists():
        overwrite = typer.confirm(f"Config already exists at {target}. Overwrite?")
        if not overwrite:
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit()

    console.print("[bold]backup-hooks configuration wizard[/bold]\n")

    # ── Storage ──
    console.print("[bold blue]Storage[/bold blue]")
    network = typer.confirm("Are backups written to network storage (CIFS/NFS)?", default=False)
    error_mb = typer.prompt("Error threshold in MB", default=512, type=float)
    warning_mb = typer.prompt("Warning threshold in MB", default=1024, type=float)
    storage = StorageConfig(
        network_enabled=network,
        thresholds=StorageThresholds(file_size_error=error_mb, file_size_warning=warning_mb),
    )

    # ── Mount ──
    mount = MountOptions()
    if network:
        console.print("\n[bold blue]Mount[/bold blue]")
        mount = MountOptions(
            mount=typer.prompt("Mount source (e.g. //nas/backups)"),
            mount_type=typer.prompt(
                "Mount type",
                type=click.Choice([t.value for t in MountType]),
                default=MountType.CIFS.value,
            ),
            backup_dir=Path(typer.prompt("Mounted directory", default="/mnt/backups")),
        )

    # ── Notifications ──
    console.print("\n[bold blue]Notifications (optional)[/bold blue]")
    notification = NotificationConfig()
    if typer.confirm("Enable notifications?", default=False):
        provider = NotificationProvider(
            typer.prompt(
                "Provider",
                type=click.Choice([p.value for p in NotificationProvider]),
                default=NotificationProvider.TELEGRAM.value,
            )
        )
        fields = {name: typer.prompt(label) for name, label in _PROVIDER_FIELDS[provider]}
        notification = NotificationConfig(enabled=True, provider=provider.value, **fields)

    # ── Registry bridge ──
    console.print("\n[bold blue]Automation runtime (optional)[/bold blue]")
    bridge_url = typer.prompt("REST bridge URL (leave empty to skip)", default="")
    registry = RegistryConfig(bridge_url=bridge_url or None)

    config = AppConfig(
        storage=storage,
        mount=mount,
        notification=notification,
        registry=registry,
        logging=LoggingConfig(level="INFO", format=LogFormat.CONSOLE),
    )

    saved_path = save_config_file(config, target)
    console.print(f"\n[green]✓[/green] Config saved to: {saved_path}")
    console.print("  File permissions set to 600 (owner-only read/write).")


@config_app.command("show")
def config_show(
        path: Path | None = typer.Option(
            None, "--path", help="Custom config file location."
        ),
) -> None:
    """Display the current configuration."""
    from backup_hooks.core.config import CONFIG_FILE

    target = path or CONFIG_FILE

    if not target.exists():
        console.print(
            f"[yellow]No config file found at {target}.[/yellow]\n"
            f"Run [bold]backup-hooks config init[/bold] to create one."
        )
        raise typer.Exit()

    content = target.read_text()
    syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
    console.print(f"[bold]Config: {target}[/bold]\n")
    console.print(syntax)


@config_app.command("path")
def config_path() -> None:
    """Show config and data directory paths."""
    from backup_hooks.core.config import CONFIG_DIR, CONFIG_FILE, DATA_DIR, LOG_FILE

    console.print("[bold]backup-hooks paths:[/bold]")
    console.print(f"  Config dir:   {CONFIG_DIR}")
    console.print(f"  Config file:  {CONFIG_FILE}")
    console.print(f"  Data dir:     {DATA_DIR}")
    console.print(f"  Log file:     {LOG_FILE}")
