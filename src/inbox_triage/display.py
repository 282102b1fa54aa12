"""Rich-based display functions for Inbox Triage."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.prompt import Prompt
from rich.table import Table

from .constants import ACTION_ARCHIVE, ACTION_DELETE, SUBJECT_DISPLAY_LIMIT
from .models import MessageRecord, Recommendation, Summary

console = Console()


def _action_color(action: str) -> str:
    """Return a Rich color name for an action."""
    if action == ACTION_DELETE:
        return "red"
    if action == ACTION_ARCHIVE:
        return "yellow"
    return "green"


def _truncate(text: str, limit: int = SUBJECT_DISPLAY_LIMIT) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def display_recommendations(pairs: list[tuple[MessageRecord, Recommendation]]) -> None:
    """Display one row per message with its recommended action."""
    table = Table(title="Triage Results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("From")
    table.add_column("Subject")
    table.add_column("Category")
    table.add_column("Score", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Action")
    table.add_column("Reason", style="dim")

    for idx, (record, rec) in enumerate(pairs, start=1):
        color = _action_color(rec.action)
        table.add_row(
            str(idx),
            _truncate(record.sender, 40),
            _truncate(record.subject),
            rec.category,
            str(rec.score),
            f"{rec.confidence}%",
            f"[{color}]{rec.action}[/{color}]",
            rec.reason,
        )

    console.print(table)


def display_summary(summary: Summary) -> None:
    """Display the action and category tallies for a batch."""
    actions = "  |  ".join(
        f"[{_action_color(action)}]{action}[/{_action_color(action)}]: {count}"
        for action, count in summary.by_action.items()
    )
    categories = "  |  ".join(
        f"{category}: {count}" for category, count in summary.by_category.items() if count
    )
    console.print(
        Panel(
            f"Total messages: {summary.total}\n{actions}\n{categories or 'No messages'}",
            title="Summary",
        )
    )


def create_progress(description: str) -> Progress:
    """Create a configured Rich Progress bar."""
    return Progress(
        SpinnerColumn(),
        TextColumn(f"[bold blue]{description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )


def confirm_action(action: str, count: int) -> bool:
    """Ask the user to type the action name in capitals to confirm."""
    color = _action_color(action)
    console.print(
        Panel(
            f"[bold]{count} messages will be [{color}]{action}d[/{color}].[/bold]",
            title="Confirm",
        )
    )
    keyword = action.upper()
    answer = Prompt.ask(f'[bold red]Type "{keyword}" to confirm[/bold red]', console=console)
    return answer == keyword


def display_apply_summary(action: str, applied: int) -> None:
    """Display a success summary after mutating messages."""
    console.print(
        Panel(
            f"[bold green]Successfully {action}d {applied} messages.[/bold green]",
            title="Done",
        )
    )
