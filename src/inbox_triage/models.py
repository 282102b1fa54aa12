"""Data models for Inbox Triage."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Mapping

from .constants import ACTIONS, CATEGORIES, REASON_SEPARATOR
from .rules import normalize_labels


@dataclass(frozen=True)
class MessageRecord:
    """Metadata for a single inbox message, as supplied by a message source."""

    id: str
    sender: str = ""  # Full From header value
    subject: str = ""
    snippet: str = ""
    timestamp: datetime | str | int | None = None
    labels: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MessageRecord:
        """Build a record from a JSON-like mapping.

        Accepts both the record's own field names and the Gmail-flavoured
        aliases ``from``, ``date`` and ``labelIds``.
        """
        labels = data.get("labels") or data.get("labelIds") or []
        return cls(
            id=str(data.get("id", "")),
            sender=data.get("sender") or data.get("from") or "",
            subject=data.get("subject") or "",
            snippet=data.get("snippet") or "",
            timestamp=data.get("timestamp") or data.get("date"),
            labels=normalize_labels(labels),
        )


@dataclass(frozen=True)
class Recommendation:
    """Triage outcome for a single message."""

    message_id: str
    action: str
    category: str
    score: int
    confidence: int
    reasons: tuple[str, ...] = ()

    @property
    def reason(self) -> str:
        return REASON_SEPARATOR.join(self.reasons)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["reasons"] = list(self.reasons)
        return data


@dataclass
class Summary:
    """Aggregate counts for a batch of recommendations."""

    total: int = 0
    by_action: dict[str, int] = field(default_factory=lambda: dict.fromkeys(ACTIONS, 0))
    by_category: dict[str, int] = field(default_factory=lambda: dict.fromkeys(CATEGORIES, 0))

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_action": dict(self.by_action),
            "by_category": dict(self.by_category),
        }


@dataclass
class TriageResult:
    """Result of triaging a batch of messages.

    ``records`` and ``recommendations`` are aligned position-for-position.
    """

    records: list[MessageRecord] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    run_date: str = field(default_factory=lambda: datetime.now().isoformat())
    query: str = ""

    def pairs(self) -> list[tuple[MessageRecord, Recommendation]]:
        return list(zip(self.records, self.recommendations))
