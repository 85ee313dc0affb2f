"""Automated readiness checks for a challenge configuration.

Everything here is pure: the checks read the challenge (and its tiers) plus
the codes of every stored challenge, and never touch the session. Unknown
enum values make a check fail; nothing in this module raises.
"""

import math
from typing import Any, Iterable

from challenge_admin.constants import (
    BOOLEAN_AGGREGATIONS,
    CHALLENGE_TYPES,
    METRIC_AGGREGATIONS,
    METRIC_SOURCES,
    METRIC_TYPES,
)
from challenge_admin.schemas import AutoChecks


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _normalize_code(code: Any) -> str:
    return str(code or "").strip().casefold()


def has_metric_source(challenge: Any) -> bool:
    source = challenge.metric_source or ""
    return bool(source) and source in METRIC_SOURCES


def field_valid(challenge: Any) -> bool:
    if not (challenge.metric_key or "").strip():
        return False
    if challenge.metric_type not in METRIC_TYPES:
        return False
    if challenge.metric_aggregation not in METRIC_AGGREGATIONS:
        return False
    if challenge.metric_type == "boolean" and challenge.metric_aggregation not in BOOLEAN_AGGREGATIONS:
        return False
    return True


def has_tier_config(challenge: Any) -> bool:
    if challenge.type not in CHALLENGE_TYPES:
        return False
    if challenge.type != "tiered":
        return True

    tiers = sorted(challenge.tiers or [], key=lambda t: t.sort_order)
    if not tiers:
        return False
    thresholds = [t.threshold_value for t in tiers]
    if not all(_is_number(v) for v in thresholds):
        return False
    return all(a < b for a, b in zip(thresholds, thresholds[1:]))


def code_unique(challenge: Any, all_challenge_codes: Iterable[str]) -> bool:
    """True when at most one stored code (this challenge's own) matches, ignoring case."""
    own = _normalize_code(challenge.code)
    if not own:
        return False
    matches = sum(1 for code in all_challenge_codes if _normalize_code(code) == own)
    return matches <= 1


def compute_auto_checks(challenge: Any, all_challenge_codes: Iterable[str]) -> AutoChecks:
    return AutoChecks(
        has_metric_source=has_metric_source(challenge),
        field_valid=field_valid(challenge),
        has_tier_config=has_tier_config(challenge),
        code_unique=code_unique(challenge, all_challenge_codes),
    )
