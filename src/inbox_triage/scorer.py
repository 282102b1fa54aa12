"""Decision step, safety overrides and the public scoring entry points."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Iterable, Sequence

from .constants import (
    ACTION_ARCHIVE,
    ACTION_DELETE,
    ACTION_KEEP,
    CATEGORY_PRIMARY,
    REASON_NO_CLEANUP,
    REASON_STARRED,
    REASON_TOO_RECENT,
)
from .models import MessageRecord, Recommendation, Summary
from .rules import DEFAULT_RULES, RuleTable
from .signals import MessageView, evaluate

logger = logging.getLogger(__name__)


def clamp_confidence(value: int) -> int:
    return max(0, min(100, value))


def decide(score: int, rules: RuleTable = DEFAULT_RULES) -> tuple[str, int]:
    """Map a final score to an action and a confidence in [0, 100]."""
    if score >= rules.delete_threshold:
        action, confidence = ACTION_DELETE, min(95, score - 20)
    elif score >= rules.archive_high_threshold:
        action, confidence = ACTION_ARCHIVE, min(90, score - 10)
    elif score >= rules.archive_threshold:
        action, confidence = ACTION_ARCHIVE, min(75, score)
    else:
        action, confidence = ACTION_KEEP, max(20, 100 - score)
    return action, clamp_confidence(confidence)


def score(
    record: MessageRecord,
    rules: RuleTable = DEFAULT_RULES,
    now: datetime | None = None,
) -> Recommendation:
    """Score a single message and recommend a disposition.

    ``now`` anchors the age and recency checks; it defaults to the current
    UTC time.  Scoring is otherwise a pure function of the record and the
    rule table.
    """
    now = now or datetime.now(timezone.utc)
    view = MessageView.from_record(record, now)
    state = evaluate(view, rules)

    action, confidence = decide(state.score, rules)
    reasons = list(state.reasons)

    # Safety overrides only ever soften the action.
    if rules.starred_label in view.labels:
        return Recommendation(
            message_id=record.id,
            action=ACTION_KEEP,
            category=CATEGORY_PRIMARY,
            score=0,
            confidence=decide(0, rules)[1],
            reasons=(REASON_STARRED,),
        )

    if action == ACTION_DELETE:
        if view.age_days is None:
            logger.debug("Message %s: no usable timestamp, recency floor not applied", record.id)
        elif view.age_days < rules.recency_floor_days:
            action = ACTION_ARCHIVE
            reasons.append(REASON_TOO_RECENT)

    return Recommendation(
        message_id=record.id,
        action=action,
        category=state.category,
        score=state.score,
        confidence=confidence,
        reasons=tuple(reasons) or (REASON_NO_CLEANUP,),
    )


def summarize(recommendations: Iterable[Recommendation]) -> Summary:
    """Tally recommendations by action and category."""
    summary = Summary()
    for rec in recommendations:
        summary.total += 1
        summary.by_action[rec.action] = summary.by_action.get(rec.action, 0) + 1
        summary.by_category[rec.category] = summary.by_category.get(rec.category, 0) + 1
    return summary


def score_batch(
    records: Sequence[MessageRecord],
    rules: RuleTable = DEFAULT_RULES,
    now: datetime | None = None,
    workers: int | None = None,
) -> tuple[list[Recommendation], Summary]:
    """Score every record independently, preserving input order.

    A single ``now`` is used for the whole batch.  With ``workers`` > 1 the
    records are scored on a thread pool; ``Executor.map`` returns results in
    input order.
    """
    now = now or datetime.now(timezone.utc)

    if workers and workers > 1 and len(records) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            recommendations = list(pool.map(lambda r: score(r, rules, now), records))
    else:
        recommendations = [score(record, rules, now) for record in records]

    summary = summarize(recommendations)
    logger.debug(
        "Scored %d message(s): %s",
        summary.total,
        ", ".join(f"{k}={v}" for k, v in summary.by_action.items()),
    )
    return recommendations, summary
