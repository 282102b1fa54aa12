"""Rule tables consumed by the signal evaluators.

Every keyword list, domain list, weight and threshold used while scoring
lives on a single read-only :class:`RuleTable`.  The evaluators never read
module-level literals directly, so a table can be swapped in tests or tuned
from a JSON file without touching control flow.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from . import constants as c

logger = logging.getLogger(__name__)


class RulesError(ValueError):
    """Raised when a rule override file cannot be applied."""


@dataclass(frozen=True)
class RuleTable:
    """Static configuration for one scoring run."""

    # Label tags
    promotions_label: str = c.LABEL_PROMOTIONS
    social_label: str = c.LABEL_SOCIAL
    updates_label: str = c.LABEL_UPDATES
    forums_label: str = c.LABEL_FORUMS
    starred_label: str = c.LABEL_STARRED
    important_label: str = c.LABEL_IMPORTANT

    # Weights
    promotions_label_weight: int = c.WEIGHT_PROMOTIONS_LABEL
    social_label_weight: int = c.WEIGHT_SOCIAL_LABEL
    updates_label_weight: int = c.WEIGHT_UPDATES_LABEL
    forums_label_weight: int = c.WEIGHT_FORUMS_LABEL
    important_label_weight: int = c.WEIGHT_IMPORTANT_LABEL
    promo_keywords_many_weight: int = c.WEIGHT_PROMO_KEYWORDS_MANY
    promo_keyword_single_weight: int = c.WEIGHT_PROMO_KEYWORD_SINGLE
    unsubscribe_weight: int = c.WEIGHT_UNSUBSCRIBE
    social_domain_weight: int = c.WEIGHT_SOCIAL_DOMAIN
    social_phrase_weight: int = c.WEIGHT_SOCIAL_PHRASE
    newsletter_domain_weight: int = c.WEIGHT_NEWSLETTER_DOMAIN
    newsletter_keyword_weight: int = c.WEIGHT_NEWSLETTER_KEYWORD
    automated_weight: int = c.WEIGHT_AUTOMATED
    important_keyword_weight: int = c.WEIGHT_IMPORTANT_KEYWORD
    personal_domain_weight: int = c.WEIGHT_PERSONAL_DOMAIN
    personal_domain_score_ceiling: int = c.PERSONAL_DOMAIN_SCORE_CEILING
    age_tiers: tuple[tuple[int, int], ...] = c.AGE_TIERS

    # Decision
    delete_threshold: int = c.SCORE_DELETE
    archive_high_threshold: int = c.SCORE_ARCHIVE_HIGH
    archive_threshold: int = c.SCORE_ARCHIVE
    recency_floor_days: int = c.RECENCY_FLOOR_DAYS

    # Keyword and domain tables
    promo_keywords: tuple[str, ...] = tuple(c.PROMO_KEYWORDS)
    unsubscribe_phrases: tuple[str, ...] = tuple(c.UNSUBSCRIBE_PHRASES)
    social_domains: tuple[str, ...] = tuple(c.SOCIAL_DOMAINS)
    social_phrases: tuple[str, ...] = tuple(c.SOCIAL_PHRASES)
    newsletter_domains: tuple[str, ...] = tuple(c.NEWSLETTER_DOMAINS)
    newsletter_keywords: tuple[str, ...] = tuple(c.NEWSLETTER_KEYWORDS)
    automated_markers: tuple[str, ...] = tuple(c.AUTOMATED_MARKERS)
    important_keywords: tuple[str, ...] = tuple(c.IMPORTANT_KEYWORDS)
    personal_domains: tuple[str, ...] = tuple(c.PERSONAL_DOMAINS)


DEFAULT_RULES = RuleTable()


def normalize_label(label: str) -> str:
    """Map a provider label onto the tag vocabulary used by the rules.

    Gmail system ids such as ``CATEGORY_PROMOTIONS`` become ``promotions``;
    anything else is lowercased and passed through.
    """
    return c.GMAIL_LABEL_MAP.get(label.upper(), label.lower())


def normalize_labels(labels: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_label(label) for label in labels if label)


def _coerce(name: str, value, default):
    """Coerce a JSON value to the type of the field's default."""
    if isinstance(default, bool) or isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise RulesError(f"Rule '{name}' must be an integer, got {value!r}")
        return value
    if isinstance(default, str):
        if not isinstance(value, str):
            raise RulesError(f"Rule '{name}' must be a string, got {value!r}")
        return value.lower()
    if name == "age_tiers":
        try:
            tiers = tuple((int(days), int(weight)) for days, weight in value)
        except (TypeError, ValueError) as e:
            raise RulesError(f"Rule 'age_tiers' must be a list of [days, weight] pairs: {e}") from e
        return tuple(sorted(tiers, key=lambda t: t[0], reverse=True))
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise RulesError(f"Rule '{name}' must be a list of strings")
    return tuple(v.lower() for v in value)


def apply_overrides(base: RuleTable, overrides: dict) -> RuleTable:
    """Return a copy of ``base`` with ``overrides`` applied."""
    defaults = {f.name: getattr(base, f.name) for f in dataclasses.fields(base)}
    unknown = sorted(set(overrides) - set(defaults))
    if unknown:
        raise RulesError(f"Unknown rule(s): {', '.join(unknown)}")

    changes = {name: _coerce(name, value, defaults[name]) for name, value in overrides.items()}
    return dataclasses.replace(base, **changes)


def load_rules(path: str | Path | None) -> RuleTable:
    """Load a rule table from a JSON override file.

    Keys are :class:`RuleTable` field names; missing keys keep their
    defaults.  ``None`` returns :data:`DEFAULT_RULES`.
    """
    if path is None:
        return DEFAULT_RULES

    path = Path(path)
    try:
        with open(path) as f:
            overrides = json.load(f)
    except FileNotFoundError as e:
        raise RulesError(f"Rules file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise RulesError(f"Rules file {path} is not valid JSON: {e}") from e

    if not isinstance(overrides, dict):
        raise RulesError(f"Rules file {path} must contain a JSON object")

    rules = apply_overrides(DEFAULT_RULES, overrides)
    logger.debug("Loaded %d rule override(s) from %s", len(overrides), path)
    return rules
