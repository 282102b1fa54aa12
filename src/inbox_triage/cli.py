"""CLI entry point for Inbox Triage."""

from __future__ import annotations

import json
import logging
from datetime import datetime

import click
from rich.logging import RichHandler

from .auth import authenticated_address, get_gmail_service
from .constants import ACTION_ARCHIVE, ACTION_DELETE, ACTIONS, CATEGORIES, CONFIDENCE_LEVELS
from .display import console, display_recommendations, display_summary
from .executor import apply_recommendations
from .export import export_recommendations
from .filters import confidence_for_level, select_recommendations
from .models import MessageRecord, TriageResult
from .rules import RuleTable, RulesError, load_rules
from .scanner import triage_mailbox, triage_records
from .scorer import summarize


def _selection_options(func):
    """Options shared by every command that filters recommendations."""
    options = [
        click.option(
            "--rules",
            "rules_path",
            default=None,
            envvar="INBOX_TRIAGE_RULES",
            type=click.Path(dir_okay=False),
            help="JSON file overriding the default rule table.",
        ),
        click.option("--min-confidence", default=0, type=click.IntRange(0, 100), help="Minimum confidence (0-100)."),
        click.option(
            "--level",
            default=None,
            type=click.Choice(list(CONFIDENCE_LEVELS)),
            help="Named confidence level; overrides --min-confidence.",
        ),
        click.option(
            "-c",
            "--category",
            "categories",
            multiple=True,
            type=click.Choice(list(CATEGORIES)),
            help="Only show these categories (repeatable).",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _output_options(func):
    func = click.option(
        "--format", "fmt", type=click.Choice(["csv", "json"]), default="csv", help="Output format."
    )(func)
    func = click.option("-o", "--output", default=None, help="Also write results to this file.")(func)
    return func


def _load_rules(rules_path: str | None) -> RuleTable:
    try:
        return load_rules(rules_path)
    except RulesError as e:
        raise click.ClickException(str(e)) from e


def _gmail_service():
    try:
        return get_gmail_service()
    except FileNotFoundError as e:
        raise click.ClickException(str(e)) from e


def _select(
    result: TriageResult,
    min_confidence: int,
    level: str | None,
    categories: tuple[str, ...],
    action: str | None,
) -> TriageResult:
    """Narrow a result down to the recommendations that pass the filters."""
    threshold = confidence_for_level(level) if level else min_confidence
    selected = select_recommendations(
        result.recommendations,
        min_confidence=threshold,
        categories=categories or None,
        action=action,
    )
    keep = {id(rec) for rec in selected}
    pairs = [(record, rec) for record, rec in result.pairs() if id(rec) in keep]
    return TriageResult(
        records=[record for record, _ in pairs],
        recommendations=[rec for _, rec in pairs],
        summary=summarize(rec for _, rec in pairs),
        run_date=result.run_date,
        query=result.query,
    )


def _report(selected: TriageResult, output: str | None, fmt: str) -> None:
    display_recommendations(selected.pairs())
    display_summary(selected.summary)
    if output:
        export_recommendations(selected, format=fmt, output_path=output)
        console.print(f"Results saved to {output}")


def _read_records(path: str) -> list[MessageRecord]:
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("messages", [])
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise click.ClickException(f"{path} must contain a list of message objects")
    return [MessageRecord.from_dict(item) for item in data]


@click.group()
@click.version_option(version="0.1.0", prog_name="inbox-triage")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """Inbox Triage - recommend keep, archive or delete for inbox messages."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@cli.command()
@click.option("-q", "--query", default="in:inbox", help="Gmail search query.")
@click.option("-m", "--max-messages", default=100, type=int, help="Maximum messages to triage.")
@click.option("-a", "--action", default=None, type=click.Choice(list(ACTIONS)), help="Only show this action.")
@_selection_options
@_output_options
def triage(
    query: str,
    max_messages: int,
    action: str | None,
    rules_path: str | None,
    min_confidence: int,
    level: str | None,
    categories: tuple[str, ...],
    output: str | None,
    fmt: str,
) -> None:
    """Fetch messages from Gmail and recommend what to do with them."""
    rules = _load_rules(rules_path)
    service = _gmail_service()

    result = triage_mailbox(service, query=query, max_results=max_messages, rules=rules)
    selected = _select(result, min_confidence, level, categories, action)
    _report(selected, output, fmt)


@cli.command(name="score")
@click.argument("records_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--now", "now_str", default=None, help="Reference time (ISO-8601) for age checks.")
@click.option("-w", "--workers", default=1, type=click.IntRange(1, 64), help="Scoring threads.")
@click.option("-a", "--action", default=None, type=click.Choice(list(ACTIONS)), help="Only show this action.")
@_selection_options
@_output_options
def score_cmd(
    records_file: str,
    now_str: str | None,
    workers: int,
    action: str | None,
    rules_path: str | None,
    min_confidence: int,
    level: str | None,
    categories: tuple[str, ...],
    output: str | None,
    fmt: str,
) -> None:
    """Score messages from a JSON file without touching Gmail."""
    rules = _load_rules(rules_path)
    now = None
    if now_str:
        try:
            now = datetime.fromisoformat(now_str)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--now") from e

    records = _read_records(records_file)
    result = triage_records(records, rules=rules, now=now, workers=workers)
    selected = _select(result, min_confidence, level, categories, action)
    _report(selected, output, fmt)


@cli.command(name="apply")
@click.argument("action", type=click.Choice([ACTION_ARCHIVE, ACTION_DELETE]))
@click.option("-q", "--query", default="in:inbox", help="Gmail search query.")
@click.option("-m", "--max-messages", default=100, type=int, help="Maximum messages to triage.")
@click.option("--execute", is_flag=True, help="Actually change messages (default is dry-run).")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Skip the confirmation prompt.")
@_selection_options
def apply_cmd(
    action: str,
    query: str,
    max_messages: int,
    execute: bool,
    assume_yes: bool,
    rules_path: str | None,
    min_confidence: int,
    level: str | None,
    categories: tuple[str, ...],
) -> None:
    """Archive or delete the messages recommended for ACTION."""
    rules = _load_rules(rules_path)
    service = _gmail_service()

    result = triage_mailbox(service, query=query, max_results=max_messages, rules=rules)
    selected = _select(result, min_confidence, level, categories, action)
    display_recommendations(selected.pairs())

    apply_recommendations(
        service,
        selected.recommendations,
        action,
        execute=execute,
        assume_yes=assume_yes,
    )


@cli.command()
def auth() -> None:
    """Test or reset Gmail authentication."""
    try:
        address = authenticated_address()
    except FileNotFoundError as e:
        raise click.ClickException(f"Authentication failed: {e}") from e
    console.print(f"Authenticated as [bold]{address}[/bold]")
