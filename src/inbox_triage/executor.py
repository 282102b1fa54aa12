"""Apply recommended dispositions to the mailbox."""

from __future__ import annotations

import logging

from .constants import ACTION_ARCHIVE, ACTION_DELETE, MODIFY_BATCH_SIZE
from .display import confirm_action, console, create_progress, display_apply_summary
from .gmail_client import archive_messages, trash_messages
from .models import Recommendation

logger = logging.getLogger(__name__)

_MUTATIONS = {
    ACTION_ARCHIVE: archive_messages,
    ACTION_DELETE: trash_messages,
}


def apply_recommendations(
    service,
    recommendations: list[Recommendation],
    action: str,
    execute: bool = False,
    assume_yes: bool = False,
) -> dict:
    """Carry out ``action`` for every recommendation that proposes it.

    Dry-run unless ``execute`` is set.  Returns a summary dict with keys:
    selected, applied.
    """
    if action not in _MUTATIONS:
        raise ValueError(f"Cannot apply action '{action}' (expected archive or delete)")

    message_ids = [rec.message_id for rec in recommendations if rec.action == action]
    selected = len(message_ids)

    if not message_ids:
        console.print(f"[yellow]No messages recommended for {action}.[/yellow]")
        return {"selected": 0, "applied": 0}

    console.print(f"\n[bold]Messages to {action}: {selected}[/bold]")

    if not execute:
        console.print(
            f"\n[yellow][DRY RUN] No messages were changed. "
            f"Use --execute to actually {action} messages.[/yellow]"
        )
        return {"selected": selected, "applied": 0}

    if not assume_yes and not confirm_action(action, selected):
        console.print("[dim]Cancelled.[/dim]")
        return {"selected": selected, "applied": 0}

    mutate = _MUTATIONS[action]
    with create_progress(f"Applying {action}") as progress:
        total_batches = max(1, (selected + MODIFY_BATCH_SIZE - 1) // MODIFY_BATCH_SIZE)
        task = progress.add_task(action, total=total_batches)

        def on_batch(batch_num: int, total: int) -> None:
            progress.update(task, completed=batch_num)

        applied = mutate(service, message_ids, callback=on_batch)

    logger.info("Applied %s to %d message(s)", action, applied)
    display_apply_summary(action, applied)

    return {"selected": selected, "applied": applied}
