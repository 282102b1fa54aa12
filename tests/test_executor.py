"""Tests for applying recommendations."""

import pytest

import inbox_triage.executor as executor
from inbox_triage.executor import apply_recommendations
from inbox_triage.models import Recommendation


def _recs() -> list[Recommendation]:
    return [
        Recommendation("a", "delete", "Promotional", 150, 95, ("x",)),
        Recommendation("b", "archive", "Newsletter", 60, 60, ("y",)),
        Recommendation("c", "delete", "Social Media", 130, 95, ("z",)),
        Recommendation("d", "keep", "Primary", 0, 100, ("No cleanup needed",)),
    ]


def _batch_modify(service):
    return service.users.return_value.messages.return_value.batchModify


def test_dry_run_changes_nothing(gmail_service):
    service = gmail_service()
    summary = apply_recommendations(service, _recs(), "delete")
    assert summary == {"selected": 2, "applied": 0}
    _batch_modify(service).assert_not_called()


def test_execute_delete(gmail_service):
    service = gmail_service()
    summary = apply_recommendations(service, _recs(), "delete", execute=True, assume_yes=True)
    assert summary == {"selected": 2, "applied": 2}
    body = _batch_modify(service).call_args.kwargs["body"]
    assert body["ids"] == ["a", "c"]
    assert body["addLabelIds"] == ["TRASH"]


def test_execute_archive(gmail_service):
    service = gmail_service()
    summary = apply_recommendations(service, _recs(), "archive", execute=True, assume_yes=True)
    assert summary == {"selected": 1, "applied": 1}
    assert _batch_modify(service).call_args.kwargs["body"] == {"ids": ["b"], "removeLabelIds": ["INBOX"]}


def test_declined_confirmation(gmail_service, monkeypatch):
    monkeypatch.setattr(executor, "confirm_action", lambda action, count: False)
    service = gmail_service()
    summary = apply_recommendations(service, _recs(), "archive", execute=True)
    assert summary == {"selected": 1, "applied": 0}
    _batch_modify(service).assert_not_called()


def test_nothing_to_apply(gmail_service):
    service = gmail_service()
    recs = [r for r in _recs() if r.action == "keep"]
    assert apply_recommendations(service, recs, "delete", execute=True) == {"selected": 0, "applied": 0}


def test_keep_is_not_an_applicable_action(gmail_service):
    with pytest.raises(ValueError):
        apply_recommendations(gmail_service(), _recs(), "keep")
