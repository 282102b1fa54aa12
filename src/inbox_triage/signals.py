"""Signal evaluators.

Each evaluator inspects one message and may adjust the running score,
append a reason and propose a category.  They run in the order of
:data:`EVALUATORS`; the order decides which reasons appear first and which
category wins when several fire.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable

from .constants import (
    CATEGORY_FORUMS,
    CATEGORY_NEWSLETTER,
    CATEGORY_PRIMARY,
    CATEGORY_PROMOTIONAL,
    CATEGORY_RECEIPTS,
    CATEGORY_SOCIAL,
)
from .models import MessageRecord
from .rules import RuleTable

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60
# Shortest digit string read as epoch milliseconds (internalDate); shorter
# runs such as 20240531 are compact calendar dates.
_EPOCH_MILLIS_MIN_DIGITS = 12


def parse_timestamp(value) -> datetime | None:
    """Parse a message timestamp into an aware datetime.

    Accepts datetimes (naive values are taken as UTC), epoch milliseconds
    (Gmail ``internalDate``, as int or digit string), ISO-8601 strings and
    RFC 2822 ``Date`` headers.  Returns ``None`` for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.isascii() and text.isdigit() and len(text) >= _EPOCH_MILLIS_MIN_DIGITS:
        try:
            return parse_timestamp(int(text))
        except ValueError:
            return None

    try:
        if text.isascii() and text.isdigit() and len(text) == 8:
            parsed = datetime.strptime(text, "%Y%m%d")
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None
        if parsed is None:
            return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def elapsed_days(timestamp, now: datetime) -> int | None:
    """Whole days between ``timestamp`` and ``now``, or ``None`` if unparseable."""
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return None
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.floor((now - parsed).total_seconds() / _SECONDS_PER_DAY)


@dataclass(frozen=True)
class MessageView:
    """Lowercased view of a record, prepared once for all evaluators."""

    sender: str
    subject: str
    snippet: str
    labels: frozenset[str]
    age_days: int | None

    @classmethod
    def from_record(cls, record: MessageRecord, now: datetime) -> MessageView:
        age = elapsed_days(record.timestamp, now)
        if age is None:
            logger.debug(
                "Message %s: timestamp %r not parseable, skipping age checks",
                record.id,
                record.timestamp,
            )
        return cls(
            sender=(record.sender or "").lower(),
            subject=(record.subject or "").lower(),
            snippet=(record.snippet or "").lower(),
            labels=frozenset(label.lower() for label in record.labels),
            age_days=age,
        )


@dataclass
class ScoreState:
    """Running accumulator shared by the evaluators for one message."""

    score: int = 0
    category: str = CATEGORY_PRIMARY
    reasons: list[str] = field(default_factory=list)

    def add(self, delta: int, reason: str, category: str | None = None) -> None:
        self.score += delta
        if category is not None:
            self.category = category
        self.reasons.append(reason)

    def propose(self, category: str) -> str:
        """Category to use if nothing more specific has been assigned yet."""
        return category if self.category == CATEGORY_PRIMARY else self.category


Evaluator = Callable[[MessageView, ScoreState, RuleTable], None]


def _any_in(needles, *haystacks: str) -> bool:
    return any(needle in text for needle in needles for text in haystacks)


def promotions_label(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if rules.promotions_label in view.labels:
        state.add(rules.promotions_label_weight, "Gmail categorized as promotional", CATEGORY_PROMOTIONAL)


def social_label(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if rules.social_label in view.labels:
        state.add(rules.social_label_weight, "Social media notification", CATEGORY_SOCIAL)


def updates_label(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if rules.updates_label in view.labels:
        state.add(rules.updates_label_weight, "Newsletter/update email", CATEGORY_NEWSLETTER)


def forums_label(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if rules.forums_label in view.labels:
        state.add(rules.forums_label_weight, "Forum notification", CATEGORY_FORUMS)


def promo_keywords(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    hits = [kw for kw in rules.promo_keywords if kw in view.subject or kw in view.snippet]
    if len(hits) >= 2:
        state.add(
            rules.promo_keywords_many_weight,
            f"{len(hits)} promotional keywords found",
            state.propose(CATEGORY_PROMOTIONAL),
        )
    elif len(hits) == 1:
        state.add(rules.promo_keyword_single_weight, "1 promotional keyword found")


def unsubscribe_phrase(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if _any_in(rules.unsubscribe_phrases, view.snippet):
        state.add(rules.unsubscribe_weight, "Contains unsubscribe link (likely marketing)")


def social_domain(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if _any_in(rules.social_domains, view.sender):
        state.add(rules.social_domain_weight, "Social media platform", CATEGORY_SOCIAL)


def social_phrase(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if _any_in(rules.social_phrases, view.subject, view.snippet):
        state.add(
            rules.social_phrase_weight,
            "Social media activity notification",
            state.propose(CATEGORY_SOCIAL),
        )


def newsletter_domain(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if _any_in(rules.newsletter_domains, view.sender):
        state.add(
            rules.newsletter_domain_weight,
            "Sent via newsletter service",
            state.propose(CATEGORY_NEWSLETTER),
        )


def newsletter_keyword(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if _any_in(rules.newsletter_keywords, view.subject):
        state.add(rules.newsletter_keyword_weight, "Newsletter detected")


def automated_sender(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if _any_in(rules.automated_markers, view.sender, view.subject):
        state.add(rules.automated_weight, "Automated message")


def message_age(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if view.age_days is None:
        return
    for days, weight in rules.age_tiers:
        if view.age_days > days:
            state.add(weight, f"Email is {view.age_days} days old")
            return


def important_keyword(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    # Overwrites any earlier category, including Promotional.
    if _any_in(rules.important_keywords, view.subject):
        state.add(rules.important_keyword_weight, "Contains important keywords", CATEGORY_RECEIPTS)


def personal_domain(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if state.score < rules.personal_domain_score_ceiling and _any_in(rules.personal_domains, view.sender):
        state.add(rules.personal_domain_weight, "Personal email address")


def important_label(view: MessageView, state: ScoreState, rules: RuleTable) -> None:
    if rules.important_label in view.labels:
        state.add(rules.important_label_weight, "Marked as important")


EVALUATORS: tuple[Evaluator, ...] = (
    promotions_label,
    social_label,
    updates_label,
    forums_label,
    promo_keywords,
    unsubscribe_phrase,
    social_domain,
    social_phrase,
    newsletter_domain,
    newsletter_keyword,
    automated_sender,
    message_age,
    important_keyword,
    personal_domain,
    important_label,
)


def evaluate(view: MessageView, rules: RuleTable) -> ScoreState:
    """Run every evaluator in order and return the accumulated state."""
    state = ScoreState()
    for evaluator in EVALUATORS:
        evaluator(view, state, rules)
    return state
