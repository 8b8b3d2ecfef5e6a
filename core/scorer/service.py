#!/usr/bin/env python3
"""
Compatibility Scorer - Weighted multi-factor score for a candidate pair.

Combines four independently normalized sub-scores:
- Distance: nearer is better, relative to the requester's max distance
- Interests: Jaccard overlap of interest tags
- Age fit: closeness to the middle of the requester's preferred age range
- Recency: decays with the candidate's time since last activity

The weighted sum is clamped to [0, 1]. Weights come from ScorerConfig and
are validated to sum to 1.0 when configuration loads.

Pairs are expected to have passed exclusion and preference checks already.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple
import logging

from core.config_loader import ScorerConfig
from core.matching.models import Preference, ScoreBreakdown, UserProfile
from core.scorer import subscores

logger = logging.getLogger(__name__)


def preference_age_range(profile: UserProfile) -> Optional[Tuple[int, int]]:
    """Requester's complete preferred age range, or None."""
    pref = profile.preference
    if isinstance(pref, Preference) and pref.has_age_range:
        return pref.min_age, pref.max_age
    return None


def preference_max_distance(profile: UserProfile) -> Optional[float]:
    pref = profile.preference
    if isinstance(pref, Preference):
        return pref.max_distance_km
    return None


class CompatibilityScorer:
    """
    Score a (requester, candidate) pair in [0.0, 1.0].
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    @property
    def weights(self):
        return self.config.weights

    def score(
        self,
        requester: UserProfile,
        candidate: UserProfile,
        distance_km: float,
        max_distance_km: Optional[float] = None,
        age_range: Optional[Tuple[int, int]] = None,
        now: Optional[datetime] = None
    ) -> ScoreBreakdown:
        """Calculate the compatibility score with its breakdown.

        Args:
            requester: Profile of the user asking for candidates
            candidate: Profile being scored
            distance_km: Precomputed distance between the two
            max_distance_km: Effective distance cap; defaults to the requester's
                preference, then to default_max_distance_km
            age_range: Effective preferred age range; defaults to the
                requester's preference range
            now: Reference time for recency (defaults to current UTC time)

        Returns:
            ScoreBreakdown with sub-scores, weights and the final score
        """
        now = now or datetime.now(timezone.utc)

        ceiling = max_distance_km
        if ceiling is None:
            ceiling = preference_max_distance(requester)
        if ceiling is None:
            ceiling = self.config.default_max_distance_km

        if age_range is None:
            age_range = preference_age_range(requester)

        distance = subscores.distance_score(distance_km, ceiling)
        interests = subscores.interest_overlap_score(requester.interests, candidate.interests)
        age = subscores.age_fit_score(candidate.age, age_range)
        recency = subscores.recency_score(
            candidate.last_active_at, now, self.config.recency_half_life_hours
        )

        w = self.weights
        weighted = (
            w.distance * distance
            + w.interests * interests
            + w.age * age
            + w.recency * recency
        )
        final = subscores.clamp_unit(weighted)

        logger.debug(
            f"Score {requester.user_id}->{candidate.user_id}: "
            f"distance={distance:.3f}, interests={interests:.3f}, "
            f"age={age:.3f}, recency={recency:.3f}, overall={final:.3f}"
        )

        return ScoreBreakdown(
            distance=distance,
            interests=interests,
            age=age,
            recency=recency,
            weights=w.model_dump(),
            score=final,
        )
