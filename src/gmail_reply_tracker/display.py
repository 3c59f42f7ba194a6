"""Rich-based display and logging setup for Gmail Reply Tracker."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import TrackerConfig
from .constants import DATETIME_FORMAT
from .models import ReplyType, RunResult
from .presenter import color_for

console = Console()

_REPLY_TYPE_STYLES = {
    ReplyType.ACKNOWLEDGMENT: "green",
    ReplyType.FOLLOWUP_QUESTION: "cyan",
    ReplyType.URGENT: "bold red",
    ReplyType.NORMAL: "white",
}


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich on the shared console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # googleapiclient logs every discovery/HTTP detail at INFO.
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)


def display_run_summary(result: RunResult, config: TrackerConfig) -> None:
    """Show the replies tracked in a run plus per-rule totals."""
    rule_colors = {r.name: r.label_color for r in config.rules}
    tz = config.tz

    if result.records:
        table = Table(title="Tracked Replies")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Received")
        table.add_column("From")
        table.add_column("Subject")
        table.add_column("Rule")
        table.add_column("Type")
        table.add_column("Replies", justify="right")
        table.add_column("Keywords")

        for idx, record in enumerate(result.records, start=1):
            received = record.received_at.astimezone(tz).strftime(DATETIME_FORMAT) if record.received_at else ""
            rule_color = rule_colors.get(record.rule_name, "white")
            count_color = color_for(record.reply_count, config.thresholds)
            count = str(record.reply_count)
            table.add_row(
                str(idx),
                received,
                escape(record.sender),
                escape(record.subject),
                f"[{rule_color}]{escape(record.rule_name)}[/]",
                f"[{_REPLY_TYPE_STYLES[record.reply_type]}]{record.reply_type.value}[/]",
                f"[black on {count_color}]{count}[/]" if count_color else count,
                escape(record.keywords),
            )
        console.print(table)
    else:
        console.print("[dim]No new replies.[/dim]")

    lines = []
    for rule in config.rules:
        status = "[red]failed[/red]" if rule.name in result.failed_rules else "[green]ok[/green]"
        scanned = result.threads_scanned.get(rule.name, 0)
        lines.append(f"[{rule.label_color}]{escape(rule.name)}[/]: {scanned} threads scanned ({status})")
    lines.append("")
    lines.append(f"New replies: {len(result.records)}")
    if result.first_row is not None:
        lines.append(f"Written to '{config.sheet_name}' from row {result.first_row}")

    console.print(Panel("\n".join(lines), title="Summary"))
