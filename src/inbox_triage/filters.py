"""Select which recommendations a caller should act on."""

from __future__ import annotations

from typing import Iterable

from .constants import ACTIONS, CATEGORIES, CONFIDENCE_LEVELS
from .models import Recommendation


def confidence_for_level(level: str) -> int:
    """Return the minimum confidence for a named level (high/medium/low)."""
    try:
        return CONFIDENCE_LEVELS[level.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown confidence level '{level}' (expected one of: {', '.join(CONFIDENCE_LEVELS)})"
        ) from None


def select_recommendations(
    recommendations: Iterable[Recommendation],
    min_confidence: int = 0,
    categories: Iterable[str] | None = None,
    action: str | None = None,
) -> list[Recommendation]:
    """Filter recommendations, keeping input order.

    Args:
        recommendations: Recommendations to filter.
        min_confidence: Drop anything below this confidence.
        categories: Optional allow-list of categories.
        action: Keep only recommendations with this action.
    """
    allowed = set(categories) if categories else None
    if allowed and not allowed <= set(CATEGORIES):
        raise ValueError(f"Unknown category: {', '.join(sorted(allowed - set(CATEGORIES)))}")
    if action is not None and action not in ACTIONS:
        raise ValueError(f"Unknown action '{action}'")

    return [
        rec
        for rec in recommendations
        if rec.confidence >= min_confidence
        and (allowed is None or rec.category in allowed)
        and (action is None or rec.action == action)
    ]
