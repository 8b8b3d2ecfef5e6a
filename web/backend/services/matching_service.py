#!/usr/bin/env python3
"""
Matching service - request-layer wrapper around MatchingEngine.

Converts RankedCandidate values into response models and owns the retry
policy for DependencyUnavailableError; the engine itself never retries.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from core.matching.exceptions import DependencyUnavailableError
from core.matching.models import Preference, RankedCandidate, UserProfile
from core.matching.service import MatchingEngine
from ..models.responses import (
    CandidateProfile,
    CompatibilityResponse,
    MatchCandidate,
    MatchesResponse,
    PreferenceResponse,
    ScoreBreakdownResponse
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _preference_response(profile: UserProfile) -> PreferenceResponse:
    pref = profile.preference
    if not isinstance(pref, Preference):
        return PreferenceResponse(unrestricted=True)
    return PreferenceResponse(
        unrestricted=False,
        gender=pref.gender.value,
        min_age=pref.min_age,
        max_age=pref.max_age,
        max_distance_km=pref.max_distance_km
    )


def to_match_candidate(ranked: RankedCandidate) -> MatchCandidate:
    profile = ranked.profile
    breakdown = None
    if ranked.breakdown is not None:
        breakdown = ScoreBreakdownResponse(
            distance=ranked.breakdown.distance,
            interests=ranked.breakdown.interests,
            age=ranked.breakdown.age,
            recency=ranked.breakdown.recency,
            weights=dict(ranked.breakdown.weights)
        )

    return MatchCandidate(
        candidate_profile=CandidateProfile(
            user_id=profile.user_id,
            display_name=profile.display_name,
            age=profile.age,
            gender=profile.gender.value,
            latitude=profile.latitude,
            longitude=profile.longitude,
            interests=sorted(profile.interests),
            last_active_at=profile.last_active_at,
            preference=_preference_response(profile)
        ),
        compatibility_score=round(ranked.score, 4),
        distance_km=round(ranked.distance_km, 3),
        score_breakdown=breakdown
    )


class MatchingService:
    """Service for candidate retrieval endpoints."""

    def __init__(
        self,
        engine: MatchingEngine,
        retry_attempts: int = 3,
        retry_wait_seconds: float = 0.5
    ):
        self.engine = engine
        self.retry_attempts = retry_attempts
        self.retry_wait_seconds = retry_wait_seconds

    def _call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_fixed(self.retry_wait_seconds),
            retry=retry_if_exception_type(DependencyUnavailableError),
            reraise=True
        )
        for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        f"Retrying {fn.__name__} after dependency failure "
                        f"(attempt {attempt.retry_state.attempt_number}/{self.retry_attempts})"
                    )
                return fn(*args, **kwargs)

    def _page_size(self, limit: Optional[int]) -> int:
        return limit if limit is not None else self.engine.config.engine.default_page_size

    def _matches_response(
        self,
        user_id: str,
        ranked: List[RankedCandidate],
        page: int,
        page_size: int
    ) -> MatchesResponse:
        matches = [to_match_candidate(r) for r in ranked]
        return MatchesResponse(
            user_id=user_id,
            page=page,
            page_size=page_size,
            count=len(matches),
            matches=matches
        )

    def potential_matches(
        self,
        user_id: str,
        limit: Optional[int] = None,
        page: int = 0
    ) -> MatchesResponse:
        page_size = self._page_size(limit)
        ranked = self._call(self.engine.find_candidates, user_id, page_size=page_size, page=page)
        return self._matches_response(user_id, ranked, page, page_size)

    def nearby_matches(
        self,
        user_id: str,
        radius_km: float,
        limit: Optional[int] = None,
        page: int = 0
    ) -> MatchesResponse:
        page_size = self._page_size(limit)
        ranked = self._call(
            self.engine.find_nearby, user_id, radius_km, page_size=page_size, page=page
        )
        return self._matches_response(user_id, ranked, page, page_size)

    def age_matches(
        self,
        user_id: str,
        min_age: int,
        max_age: int,
        limit: Optional[int] = None,
        page: int = 0
    ) -> MatchesResponse:
        page_size = self._page_size(limit)
        ranked = self._call(
            self.engine.find_by_age, user_id, min_age, max_age, page_size=page_size, page=page
        )
        return self._matches_response(user_id, ranked, page, page_size)

    def compatibility(self, user_id_a: str, user_id_b: str) -> CompatibilityResponse:
        ranked = self._call(self.engine.compatibility_between, user_id_a, user_id_b)
        return CompatibilityResponse(user_id=user_id_a, match=to_match_candidate(ranked))
