"""Tests for the scoring module."""

import dataclasses

import pytest

from inbox_triage.models import MessageRecord
from inbox_triage.rules import DEFAULT_RULES
from inbox_triage.scorer import decide, score, score_batch, summarize

from conftest import NOW, days_ago


def test_promotional_example(promo_message, now):
    """Promotions label, keywords and unsubscribe on a 40 day old mail should be deleted."""
    rec = score(promo_message, now=now)
    assert rec.message_id == "msg_promo_001"
    assert rec.category == "Promotional"
    assert rec.score == 70 + 50 + 35 + 15
    assert rec.action == "delete"
    assert rec.confidence == 95
    assert rec.reasons == (
        "Gmail categorized as promotional",
        "3 promotional keywords found",
        "Contains unsubscribe link (likely marketing)",
        "Email is 40 days old",
    )


def test_starred_example(starred_message, now):
    rec = score(starred_message, now=now)
    assert rec.action == "keep"
    assert rec.category == "Primary"
    assert rec.score == 0
    assert rec.reasons == ("Email is starred",)
    assert rec.confidence == 100


def test_personal_example(personal_message, now):
    rec = score(personal_message, now=now)
    assert rec.score < 50
    assert rec.score == -20
    assert rec.action == "keep"
    assert rec.category == "Primary"
    assert rec.confidence == 100
    assert rec.reasons == ("Personal email address",)


def test_unparseable_timestamp_example(social_message, now):
    """No timestamp: age is skipped and the recency floor does not block deletion."""
    rec = score(social_message, now=now)
    assert rec.score == 60 + 55 + 40
    assert rec.category == "Social Media"
    assert rec.action == "delete"
    assert rec.reasons == (
        "Social media notification",
        "Social media platform",
        "Social media activity notification",
    )


def test_recency_floor_downgrades_delete(promo_message, now):
    recent = dataclasses.replace(promo_message, timestamp=days_ago(2))
    rec = score(recent, now=now)
    assert rec.score == 155
    assert rec.action == "archive"
    assert rec.reasons[-1] == "Too recent to delete"


def test_recency_floor_applies_to_compact_dates(promo_message, now):
    rec = score(dataclasses.replace(promo_message, timestamp="20240531"), now=now)
    assert rec.action == "archive"
    assert rec.reasons[-1] == "Too recent to delete"
    assert not any("days old" in reason for reason in rec.reasons)


def test_malformed_digit_timestamps_are_skipped(promo_message, now):
    for timestamp in ("\u00b2", "9" * 5000):
        rec = score(dataclasses.replace(promo_message, timestamp=timestamp), now=now)
        assert rec.score == 155
        assert rec.action == "delete"


def test_recency_floor_respects_configured_days(promo_message, now):
    ten_days = dataclasses.replace(promo_message, timestamp=days_ago(10))
    assert score(ten_days, now=now).action == "delete"

    strict = dataclasses.replace(DEFAULT_RULES, recency_floor_days=14)
    assert score(ten_days, rules=strict, now=now).action == "archive"


def test_recency_floor_never_escalates(now):
    record = MessageRecord(id="m1", sender="a@b.org", subject="hello", timestamp=days_ago(1))
    rec = score(record, now=now)
    assert rec.action == "keep"
    assert rec.reasons == ("No cleanup needed",)


@pytest.mark.parametrize(
    "record",
    [
        MessageRecord(id="s1", labels=frozenset({"starred"})),
        MessageRecord(
            id="s2",
            sender="noreply@facebook.com",
            subject="Flash sale! 70% off, shop now",
            snippet="unsubscribe",
            timestamp=days_ago(365),
            labels=frozenset({"starred", "promotions", "social", "updates", "forums"}),
        ),
        MessageRecord(
            id="s3",
            sender="boss@gmail.com",
            subject="Important: verify your account",
            labels=frozenset({"starred", "important"}),
        ),
    ],
)
def test_starred_always_kept(record, now):
    rec = score(record, now=now)
    assert (rec.action, rec.category, rec.score) == ("keep", "Primary", 0)


def test_no_delete_for_recent_messages(now):
    loud = MessageRecord(
        id="loud",
        sender="noreply@mailchimp.com",
        subject="Newsletter: flash sale, 50% off, shop now",
        snippet="unsubscribe or manage preferences",
        labels=frozenset({"promotions", "updates"}),
    )
    for age in range(0, 7):
        rec = score(dataclasses.replace(loud, timestamp=days_ago(age)), now=now)
        assert rec.action != "delete"
    assert score(dataclasses.replace(loud, timestamp=days_ago(7)), now=now).action == "delete"


@pytest.mark.parametrize(
    "value,expected",
    [
        (500, ("delete", 95)),
        (120, ("delete", 95)),
        (119, ("archive", 90)),
        (80, ("archive", 70)),
        (79, ("archive", 75)),
        (50, ("archive", 50)),
        (49, ("keep", 51)),
        (0, ("keep", 100)),
        (-500, ("keep", 100)),
    ],
)
def test_decide(value, expected):
    assert decide(value) == expected


def test_confidence_always_in_range():
    for value in range(-500, 501, 7):
        _, confidence = decide(value)
        assert 0 <= confidence <= 100


def test_score_is_deterministic(promo_message, now):
    assert score(promo_message, now=now) == score(promo_message, now=now)


def test_score_batch_preserves_order(promo_message, personal_message, social_message, starred_message):
    records = [personal_message, promo_message, starred_message, social_message] * 5

    recs, summary = score_batch(records, now=NOW, workers=4)

    assert [r.message_id for r in recs] == [r.id for r in records]
    assert recs == score_batch(records, now=NOW)[0]
    assert summary.total == 20
    assert summary.by_action == {"keep": 10, "archive": 0, "delete": 10}
    assert summary.by_category["Primary"] == 10
    assert summary.by_category["Promotional"] == 5
    assert summary.by_category["Social Media"] == 5
    assert sum(summary.by_category.values()) == 20


def test_score_batch_empty():
    recs, summary = score_batch([], now=NOW)
    assert recs == []
    assert summary.total == 0
    assert set(summary.by_action.values()) == {0}


def test_summarize_matches_fields(promo_message, personal_message, now):
    recs = [score(promo_message, now=now), score(personal_message, now=now)]
    summary = summarize(recs)
    assert summary.by_action["delete"] == 1
    assert summary.by_action["keep"] == 1
    assert summary.by_category["Promotional"] == 1
    assert summary.by_category["Primary"] == 1
