"""Shared fixtures for tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from inbox_triage.models import MessageRecord

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days: int) -> datetime:
    return NOW - timedelta(days=days)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def promo_message() -> MessageRecord:
    return MessageRecord(
        id="msg_promo_001",
        sender="deals@shop.com",
        subject="50% off sale, limited time",
        snippet="unsubscribe here",
        timestamp=days_ago(40),
        labels=frozenset({"promotions"}),
    )


@pytest.fixture
def personal_message() -> MessageRecord:
    return MessageRecord(
        id="msg_ps_001",
        sender="Mom <mom@gmail.com>",
        subject="dinner tonight?",
        snippet="Let me know if you can make it",
        timestamp=days_ago(2),
    )


@pytest.fixture
def social_message() -> MessageRecord:
    return MessageRecord(
        id="msg_soc_001",
        sender="notify@facebook.com",
        subject="John commented on your post",
        snippet="",
        timestamp="",
        labels=frozenset({"social"}),
    )


@pytest.fixture
def starred_message() -> MessageRecord:
    return MessageRecord(
        id="msg_star_001",
        sender="billing@vendor.com",
        subject="URGENT invoice overdue",
        snippet="Please pay now",
        timestamp=days_ago(200),
        labels=frozenset({"starred", "promotions"}),
    )


class FakeBatch:
    """Stand-in for BatchHttpRequest that answers from a dict of responses.

    Requests are message ids (see ``gmail_service``); ids missing from
    ``responses`` get an exception passed to their callback.
    """

    def __init__(self, responses: dict) -> None:
        self.responses = responses
        self._requests: list = []

    def add(self, request, callback=None) -> None:
        self._requests.append((request, callback))

    def execute(self) -> None:
        for msg_id, callback in self._requests:
            if msg_id in self.responses:
                callback(msg_id, self.responses[msg_id], None)
            else:
                callback(msg_id, None, RuntimeError(f"not found: {msg_id}"))


@pytest.fixture
def gmail_service():
    """Build a MagicMock Gmail service.

    Returns a factory taking (pages, responses): ``pages`` feeds successive
    ``messages().list`` calls and ``responses`` maps ids to metadata
    resources for ``messages().get``.
    """

    def _factory(pages: list[dict] | None = None, responses: dict | None = None) -> MagicMock:
        service = MagicMock()
        messages = service.users.return_value.messages.return_value
        messages.list.return_value.execute.side_effect = list(pages or [])
        messages.get.side_effect = lambda **kwargs: kwargs["id"]
        service.new_batch_http_request.side_effect = lambda: FakeBatch(responses or {})
        return service

    return _factory
