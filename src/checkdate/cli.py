"""Typer-based CLI for checkdate."""

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import CheckdateConfig, CheckdateSettings, SettingsStore
from .logging_setup import configure_logging
from .notify import ConsoleNotifier
from .orchestrator import stamp_corpus, stamp_document_text, stamp_file
from .stamper import stamp_text
from .store import DocumentIOError, VaultDocumentStore

app = typer.Typer(
    name="checkdate",
    help="checkdate - stamp unchecked Markdown checkboxes with a creation date",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

VAULT_OPTION_HELP = "Path to vault directory (default: .checkdate/config.toml, CHECKDATE_VAULT env or cwd)"


def _load(vault_path: Optional[str], debug: bool) -> tuple[CheckdateConfig, SettingsStore, CheckdateSettings]:
    try:
        config = CheckdateConfig.from_env(vault_path)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    settings_store = SettingsStore(config.settings_path)
    settings = settings_store.load()
    configure_logging(debug or settings.enable_debug_logging)
    return config, settings_store, settings


@app.command("file")
def stamp_file_command(
    path: Path = typer.Argument(..., help="Markdown file to stamp"),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging for this run"),
):
    """Add missing creation dates to a single file.

    Uses the file's creation date (or modified date, per settings) for the stamps.
    """
    config, _, settings = _load(vault_path, debug)

    if not path.is_file():
        err_console.print(f"[red]Error: Not a file: {path}[/red]")
        raise typer.Exit(code=1)

    store = VaultDocumentStore(config.vault_path, config.exclude_globs)
    handle = store.handle_for(path)
    try:
        stamp_file(store, handle, settings, ConsoleNotifier(console))
    except DocumentIOError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command("vault")
def stamp_vault_command(
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
    batch_size: int = typer.Option(None, "--batch-size", min=1, help="Files per batch (default: config or 10)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging for this run"),
):
    """Add missing creation dates to every Markdown file in the vault."""
    config, _, settings = _load(vault_path, debug)

    store = VaultDocumentStore(config.vault_path, config.exclude_globs)
    summary = asyncio.run(
        stamp_corpus(
            store,
            settings,
            ConsoleNotifier(console),
            batch_size=batch_size or config.batch_size,
            batch_delay_ms=config.batch_delay_ms,
        )
    )

    if summary.failed_paths:
        console.print(f"[yellow]{len(summary.failed_paths)} file(s) could not be processed:[/yellow]")
        for rel_path in summary.failed_paths:
            console.print(f"  - {rel_path}")
    if not summary.ok:
        raise typer.Exit(code=1)


@app.command("text")
def stamp_text_command(
    date: str = typer.Option(None, "--date", "-d", help="Stamp date (YYYY-MM-DD, default: today)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Stamp Markdown read from stdin and write the result to stdout.

    The added count goes to stderr so the output can be piped.
    """
    configure_logging(debug)
    if date:
        try:
            datetime.strptime(date, "%Y-%m-%d")
        except ValueError:
            err_console.print(f"[red]Error: Invalid date {date!r}, expected YYYY-MM-DD[/red]")
            raise typer.Exit(code=1)

    text = sys.stdin.read()
    if date:
        result = stamp_text(text, date)
    else:
        result = stamp_document_text(text, CheckdateSettings())
    sys.stdout.write(result.text)
    err_console.print(f"[dim]Added {result.added_count} created date(s)[/dim]")


settings_app = typer.Typer(help="Settings commands")
app.add_typer(settings_app, name="settings")


def _print_settings(settings: CheckdateSettings, path: Path) -> None:
    table = Table(title=f"Settings ({path})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Enable real-time adding", str(settings.enable_real_time_adding))
    table.add_row("Date source", "creation" if settings.use_file_creation_date else "modified")
    table.add_row("Enable debug logging", str(settings.enable_debug_logging))
    console.print(table)


@settings_app.command("show")
def settings_show(
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
):
    """Display the current settings."""
    config, _, settings = _load(vault_path, False)
    _print_settings(settings, config.settings_path)


@settings_app.command("set")
def settings_set(
    real_time: Optional[bool] = typer.Option(
        None,
        "--real-time/--no-real-time",
        help="Automatically add creation dates when creating new checkboxes (read by editors that attach RealTimeStamper.from_settings_store)",
    ),
    date_source: Optional[str] = typer.Option(
        None,
        "--date-source",
        help="Use the file 'creation' or 'modified' date for retroactive adding",
    ),
    debug_logging: Optional[bool] = typer.Option(
        None,
        "--debug-logging/--no-debug-logging",
        help="Enable detailed logging for troubleshooting",
    ),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
):
    """Change one or more settings and save them."""
    config, settings_store, settings = _load(vault_path, False)

    if date_source is not None and date_source not in ("creation", "modified"):
        err_console.print("[red]Error: --date-source must be 'creation' or 'modified'[/red]")
        raise typer.Exit(code=1)

    updates = {}
    if real_time is not None:
        updates["enable_real_time_adding"] = real_time
    if date_source is not None:
        updates["use_file_creation_date"] = date_source == "creation"
    if debug_logging is not None:
        updates["enable_debug_logging"] = debug_logging

    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    settings = settings.model_copy(update=updates)
    settings_store.save(settings)
    console.print(f"[green]+[/green] Saved settings: {config.settings_path}")
    _print_settings(settings, config.settings_path)


if __name__ == "__main__":
    app()
