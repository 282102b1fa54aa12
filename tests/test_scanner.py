"""Tests for the triage orchestration."""

from inbox_triage.scanner import triage_mailbox, triage_records

from conftest import NOW


def test_triage_records(promo_message, personal_message):
    result = triage_records([promo_message, personal_message], now=NOW, query="in:inbox")

    assert result.query == "in:inbox"
    assert [rec.action for rec in result.recommendations] == ["delete", "keep"]
    assert result.pairs()[0] == (promo_message, result.recommendations[0])
    assert result.summary.total == 2


def test_triage_mailbox(gmail_service):
    responses = {
        "p1": {
            "snippet": "Click to unsubscribe",
            "labelIds": ["INBOX", "CATEGORY_PROMOTIONS"],
            "payload": {
                "headers": [
                    {"name": "From", "value": "Store <deals@store.com>"},
                    {"name": "Subject", "value": "Clearance sale ends today"},
                    {"name": "Date", "value": "Wed, 01 Nov 2023 09:00:00 +0000"},
                ]
            },
        },
        "s1": {
            "snippet": "",
            "labelIds": ["INBOX", "STARRED"],
            "payload": {
                "headers": [
                    {"name": "From", "value": "Pat <pat@example.org>"},
                    {"name": "Subject", "value": "Photos"},
                ]
            },
        },
    }
    service = gmail_service(pages=[{"messages": [{"id": "p1"}, {"id": "s1"}]}], responses=responses)

    result = triage_mailbox(service, query="in:inbox", now=NOW)

    assert [rec.message_id for rec in result.recommendations] == ["p1", "s1"]
    promo, starred = result.recommendations
    # promotions label, two keywords, unsubscribe, over 90 days old
    assert promo.score == 70 + 50 + 35 + 30
    assert promo.action == "delete"
    assert starred.action == "keep"
    assert result.summary.by_action["delete"] == 1


def test_triage_mailbox_empty(gmail_service):
    service = gmail_service(pages=[{}])
    result = triage_mailbox(service)
    assert result.recommendations == []
    assert result.summary.total == 0
