"""CLI entry point for Gmail Reply Tracker."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from crontab import CronTab

from . import __version__
from .auth import check_auth, get_services
from .config import load_config, write_config_template
from .constants import PROCESSED_IDS_KEY, SCHEDULE_INTERVAL_MINUTES
from .dedup import ProcessedIds
from .display import configure_logging, console, display_run_summary
from .engine import run_filter
from .exceptions import ConfigError
from .gmail_client import GmailMailbox
from .scheduler import install_schedule, is_supported_interval, list_schedule, remove_schedule
from .sheets import SheetWriter
from .state import StateStore

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="gmail-reply-tracker")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Gmail Reply Tracker - log unread replies to a Google Sheet."""
    configure_logging(verbose)


@cli.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to config.json (default: ~/.gmail-reply-tracker/config.json).",
)
def run(config_path: Path | None) -> None:
    """Scan for unread replies once and record them in the spreadsheet."""
    try:
        config = load_config(config_path)
        gmail, sheets = get_services()
    except (ConfigError, FileNotFoundError) as e:
        raise click.ClickException(str(e)) from e

    mailbox = GmailMailbox(gmail)
    sheet = SheetWriter(sheets, config.spreadsheet_id, config.sheet_name)

    try:
        with StateStore() as store, console.status("Tracking replies..."):
            result = run_filter(mailbox, sheet, store, config)
    except Exception as e:  # noqa: BLE001
        logger.exception("Run failed")
        raise click.ClickException(f"Run failed: {e}") from e

    display_run_summary(result, config)


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Where to write the config (default: ~/.gmail-reply-tracker/config.json).",
)
def init(force: bool, config_path: Path | None) -> None:
    """Write a starter config file."""
    try:
        path = write_config_template(config_path, force=force)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    console.print(f"[green]Config written to {path}[/green]")
    console.print("[dim]Fill in spreadsheet_id and target_address before the first run.[/dim]")


@cli.command()
def auth() -> None:
    """Test or reset Google authentication."""
    check_auth()


@cli.group(name="schedule")
def schedule_group() -> None:
    """Manage the periodic run in your crontab."""


@schedule_group.command(name="install")
@click.option(
    "--interval",
    default=SCHEDULE_INTERVAL_MINUTES,
    type=click.IntRange(min=1),
    help="Minutes between runs.",
)
def schedule_install(interval: int) -> None:
    """Run the tracker every INTERVAL minutes, replacing any previous entry."""
    if not is_supported_interval(interval):
        raise click.BadParameter(
            f"{interval} does not divide 60 and is not a whole number of hours dividing 24",
            param_hint="--interval",
        )
    cron = CronTab(user=True)
    job = install_schedule(cron, interval_minutes=interval)
    cron.write()
    console.print(f"[green]Scheduled:[/green] {job}")


@schedule_group.command(name="remove")
def schedule_remove() -> None:
    """Remove the periodic run."""
    cron = CronTab(user=True)
    removed = remove_schedule(cron)
    cron.write()
    console.print(f"[green]Removed {removed} scheduled run(s).[/green]")


@schedule_group.command(name="status")
def schedule_status() -> None:
    """Show the periodic run, if any."""
    jobs = list_schedule(CronTab(user=True))
    if not jobs:
        console.print("[dim]No scheduled run.[/dim]")
        return
    for job in jobs:
        console.print(f"{job.slices}  {job.command}")


@cli.group(name="state")
def state_group() -> None:
    """Manage the processed-message state."""


@state_group.command(name="info")
def state_info() -> None:
    """Show state statistics."""
    with StateStore() as store:
        info = store.get_info()
        processed = ProcessedIds.load(store.get(PROCESSED_IDS_KEY))

    if not info["keys"]:
        console.print("[dim]State is empty.[/dim]")
        return

    console.print(f"[bold]Database size:[/bold] {info['db_file_size'] / 1024:.1f} KB")
    console.print(f"[bold]Processed messages:[/bold] {len(processed)}")
    entry = info["keys"].get(PROCESSED_IDS_KEY)
    if entry:
        console.print(f"[bold]Last updated:[/bold] {entry['updated_at']}")


@state_group.command(name="clear")
@click.confirmation_option(prompt="Forget every processed message? Replies still unread will be recorded again.")
def state_clear() -> None:
    """Clear the processed-message state."""
    with StateStore() as store:
        store.clear()
    console.print("[green]State cleared.[/green]")


if __name__ == "__main__":
    cli()
