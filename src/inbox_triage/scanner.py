"""Triage orchestration - fetches messages from Gmail and scores them."""

from __future__ import annotations

from datetime import datetime

from .constants import BATCH_SIZE
from .display import console, create_progress
from .gmail_client import fetch_message_records, list_message_ids
from .models import MessageRecord, TriageResult
from .rules import DEFAULT_RULES, RuleTable
from .scorer import score_batch


def triage_records(
    records: list[MessageRecord],
    rules: RuleTable = DEFAULT_RULES,
    now: datetime | None = None,
    workers: int | None = None,
    query: str = "",
) -> TriageResult:
    """Score already-fetched records into a TriageResult."""
    recommendations, summary = score_batch(records, rules=rules, now=now, workers=workers)
    return TriageResult(
        records=list(records),
        recommendations=recommendations,
        summary=summary,
        query=query,
    )


def triage_mailbox(
    service,
    query: str | None = None,
    max_results: int | None = None,
    rules: RuleTable = DEFAULT_RULES,
    now: datetime | None = None,
) -> TriageResult:
    """Run a full triage: list IDs, fetch metadata, score."""
    console.print("[bold]Step 1/3:[/bold] Listing message IDs...")
    with create_progress("Listing messages") as progress:
        task = progress.add_task("listing", total=None)
        ids = list_message_ids(service, query=query, max_results=max_results)
        progress.update(task, completed=len(ids), total=len(ids))

    console.print(f"  Found [bold]{len(ids)}[/bold] messages")

    if not ids:
        return TriageResult(query=query or "")

    console.print("[bold]Step 2/3:[/bold] Fetching message metadata...")
    with create_progress("Fetching metadata") as progress:
        total_batches = (len(ids) + BATCH_SIZE - 1) // BATCH_SIZE
        task = progress.add_task("fetching", total=total_batches)

        def on_batch(batch_num: int, total: int) -> None:
            progress.update(task, completed=batch_num)

        records = fetch_message_records(service, ids, callback=on_batch)

    console.print(f"  Fetched metadata for [bold]{len(records)}[/bold] messages")

    console.print("[bold]Step 3/3:[/bold] Scoring messages...")
    return triage_records(records, rules=rules, now=now, query=query or "")
