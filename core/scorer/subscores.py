#!/usr/bin/env python3
"""
Sub-scores - Independently normalized compatibility signals.

Every function returns a value in [0.0, 1.0] and never raises for missing
optional data; absent inputs yield the neutral midpoint instead.
"""

from datetime import datetime
from typing import AbstractSet, Optional, Tuple

NEUTRAL_SCORE = 0.5


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def distance_score(distance_km: float, ceiling_km: Optional[float]) -> float:
    """
    Nearer candidates score higher.

    1.0 at distance 0, falling linearly to 0.0 at the ceiling and beyond.
    """
    if ceiling_km is None or ceiling_km <= 0:
        return NEUTRAL_SCORE
    return clamp_unit(1.0 - distance_km / ceiling_km)


def interest_overlap_score(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """Jaccard similarity of two interest sets; 0.0 when both are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def age_fit_score(candidate_age: int, age_range: Optional[Tuple[int, int]]) -> float:
    """
    1.0 at the midpoint of the preferred range, linear to 0.0 at its edges.

    A missing range scores a flat 0.5.
    """
    if age_range is None:
        return NEUTRAL_SCORE

    min_age, max_age = age_range
    half_width = (max_age - min_age) / 2.0
    midpoint = min_age + half_width

    if half_width <= 0:
        return 1.0 if candidate_age == midpoint else 0.0

    return clamp_unit(1.0 - abs(candidate_age - midpoint) / half_width)


def recency_score(
    last_active_at: Optional[datetime],
    now: datetime,
    half_life_hours: float
) -> float:
    """
    Exponential decay on time since last activity.

    Halves every half_life_hours. Timestamps ahead of `now` (clock skew)
    count as just active.
    """
    if last_active_at is None or half_life_hours <= 0:
        return NEUTRAL_SCORE

    hours_since = (now - last_active_at).total_seconds() / 3600.0
    if hours_since <= 0:
        return 1.0

    return clamp_unit(0.5 ** (hours_since / half_life_hours))
