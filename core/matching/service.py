#!/usr/bin/env python3
"""
Matching Engine - Ranked candidate retrieval for a requesting user.

Pipeline per request:
1. Validate paging and filter bounds (before any store access)
2. Load the requester identity and profile
3. Bulk-fetch exclusions, then scan the candidate pool:
   exclusion -> mutual preference compatibility -> caller overrides
4. Score survivors with CompatibilityScorer
5. Sort (score desc, distance asc, recency desc, user_id asc) and paginate

Stateless per invocation: nothing is written and no state is kept between
calls, so concurrent requests need no coordination.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from threading import Event
from typing import Callable, List, Optional, Tuple
import logging

from core.config_loader import MatchingConfig
from core.matching.exceptions import (
    InvalidProfileError, MatchingCancelledError, ProfileNotFoundError, UserNotFoundError
)
from core.matching.exclusion import ExclusionResolver
from core.matching.geo import GeoDistanceCalculator
from core.matching.interfaces import (
    BlockStore, CandidatePoolCache, ProfileStore, SwipeHistoryStore
)
from core.matching.models import (
    CandidateFilters, Preference, RankedCandidate, UserProfile
)
from core.matching.preference_compatibility import PreferenceCompatibility
from core.matching.validation import validate_profile, validate_query
from core.scorer.service import CompatibilityScorer, preference_age_range

logger = logging.getLogger(__name__)


def _rank_key(candidate: RankedCandidate):
    last_active = candidate.profile.last_active_at
    # Unknown activity sorts after any known timestamp
    recency_key = (0, -last_active.timestamp()) if last_active else (1, 0.0)
    return (-candidate.score, candidate.distance_km, recency_key, candidate.profile.user_id)


class MatchingEngine:
    """
    Find and rank mutually eligible candidates for a user.

    Collaborators are injected; the engine owns no persistence. An optional
    CandidatePoolCache short-circuits ProfileStore.find_all.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        swipe_store: SwipeHistoryStore,
        block_store: BlockStore,
        config: Optional[MatchingConfig] = None,
        cache: Optional[CandidatePoolCache] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the engine with its collaborators.

        Args:
            profile_store: Source of identities, profiles and the candidate pool
            swipe_store: Swipe history lookups
            block_store: Block relation lookups
            config: MatchingConfig with scorer weights, exclusion policy and limits
            cache: Optional candidate pool cache
            clock: Returns the reference time for recency scoring (UTC)
        """
        self.profile_store = profile_store
        self.config = config or MatchingConfig()
        self.cache = cache
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.scorer = CompatibilityScorer(self.config.scorer)
        self.exclusion = ExclusionResolver(swipe_store, block_store, self.config.exclusion)
        self.compatibility = PreferenceCompatibility()
        self.geo = GeoDistanceCalculator()

    def find_candidates(
        self,
        requester_id: str,
        filters: Optional[CandidateFilters] = None,
        page_size: Optional[int] = None,
        page: int = 0,
        cancel_event: Optional[Event] = None
    ) -> List[RankedCandidate]:
        """
        Return one page of ranked candidates for the requester.

        Args:
            requester_id: User asking for candidates
            filters: Optional radius / age band overrides (narrow only)
            page_size: Results per page (defaults to engine.default_page_size)
            page: Zero-based page index
            cancel_event: When set, the scan aborts between candidates

        Returns:
            List of RankedCandidate sorted best first

        Raises:
            InvalidArgumentError: Bad paging or filter bounds
            UserNotFoundError / ProfileNotFoundError: Unknown requester or no profile
            InvalidProfileError: Out-of-range profile data
            MatchingCancelledError: cancel_event was set during the scan
        """
        filters = filters or CandidateFilters()
        if page_size is None:
            page_size = self.config.engine.default_page_size

        validate_query(filters, page_size, page, self.config.engine.max_page_size)

        requester = self._load_profile(requester_id)
        exclusions = self.exclusion.snapshot(requester_id)
        pool = self._candidate_pool()

        max_distance = self._effective_max_distance(requester, filters)
        age_range = self._effective_age_range(requester, filters)
        now = self.clock()

        survivors: List[Tuple[UserProfile, float]] = []
        excluded = 0
        incompatible = 0
        invalid = 0
        scanned = 0

        for candidate in pool:
            self._check_cancelled(cancel_event)
            scanned += 1

            if not candidate.is_active:
                continue

            reason = exclusions.reason(candidate.user_id)
            if reason:
                logger.debug(f"Excluded {candidate.user_id} for {requester_id}: {reason}")
                excluded += 1
                continue

            try:
                validate_profile(candidate)
            except InvalidProfileError as e:
                logger.warning(f"Skipping candidate {candidate.user_id}: {e}")
                invalid += 1
                continue

            distance = self.geo.between(requester, candidate)

            if not self.compatibility.mutually_compatible(requester, candidate, distance):
                incompatible += 1
                continue

            if not self._passes_overrides(candidate, distance, filters):
                incompatible += 1
                continue

            survivors.append((candidate, distance))

        ranked = self._score_all(requester, survivors, max_distance, age_range, now, cancel_event)

        min_score = self.config.engine.min_score
        if min_score > 0:
            ranked = [r for r in ranked if r.score >= min_score]

        ranked.sort(key=_rank_key)

        start = page * page_size
        result = ranked[start:start + page_size]

        logger.info(
            f"Matching for {requester_id}: scanned={scanned}, excluded={excluded}, "
            f"incompatible={incompatible}, invalid={invalid}, ranked={len(ranked)}, returning {len(result)} "
            f"(page={page}, page_size={page_size})"
        )
        return result

    def find_nearby(
        self,
        requester_id: str,
        radius_km: float,
        page_size: Optional[int] = None,
        page: int = 0
    ) -> List[RankedCandidate]:
        """Explicit-radius mode: the radius caps the requester's own preference."""
        return self.find_candidates(
            requester_id, CandidateFilters(radius_km=radius_km), page_size=page_size, page=page
        )

    def find_by_age(
        self,
        requester_id: str,
        min_age: int,
        max_age: int,
        page_size: Optional[int] = None,
        page: int = 0
    ) -> List[RankedCandidate]:
        """Explicit-age-band mode: the band narrows the requester's own preference."""
        return self.find_candidates(
            requester_id,
            CandidateFilters(min_age=min_age, max_age=max_age),
            page_size=page_size,
            page=page
        )

    def compatibility_between(self, user_id_a: str, user_id_b: str) -> RankedCandidate:
        """
        Score user B from user A's point of view.

        No exclusion or preference gate is applied; both users must exist
        and own a profile.
        """
        profile_a = self._load_profile(user_id_a)
        profile_b = self._load_profile(user_id_b)

        distance = self.geo.between(profile_a, profile_b)
        breakdown = self.scorer.score(profile_a, profile_b, distance, now=self.clock())

        return RankedCandidate(
            profile=profile_b,
            score=breakdown.score,
            distance_km=distance,
            breakdown=breakdown
        )

    def _load_profile(self, user_id: str) -> UserProfile:
        identity = self.profile_store.find_identity(user_id)
        if identity is None:
            raise UserNotFoundError(user_id)

        profile = self.profile_store.find_by_id(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)

        validate_profile(profile)
        return profile

    def _candidate_pool(self) -> List[UserProfile]:
        if self.cache is not None:
            cached = self.cache.get_pool()
            if cached is not None:
                return cached

        pool = list(self.profile_store.find_all())

        if self.cache is not None:
            self.cache.set_pool(pool)

        return pool

    @staticmethod
    def _check_cancelled(cancel_event: Optional[Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise MatchingCancelledError("Candidate scan cancelled")

    @staticmethod
    def _passes_overrides(
        candidate: UserProfile,
        distance_km: float,
        filters: CandidateFilters
    ) -> bool:
        if filters.radius_km is not None and distance_km > filters.radius_km:
            return False
        if filters.min_age is not None and candidate.age < filters.min_age:
            return False
        if filters.max_age is not None and candidate.age > filters.max_age:
            return False
        return True

    @staticmethod
    def _effective_max_distance(
        requester: UserProfile,
        filters: CandidateFilters
    ) -> Optional[float]:
        """Tightest of the explicit radius and the requester's own max distance."""
        caps = [filters.radius_km]
        if isinstance(requester.preference, Preference):
            caps.append(requester.preference.max_distance_km)
        caps = [c for c in caps if c is not None]
        return min(caps) if caps else None

    @staticmethod
    def _effective_age_range(
        requester: UserProfile,
        filters: CandidateFilters
    ) -> Optional[Tuple[int, int]]:
        """Age range used for the age-fit score.

        An explicit band is intersected with the preference range; a band
        that does not overlap the preference falls back to the band alone.
        """
        preferred = preference_age_range(requester)
        if filters.min_age is None or filters.max_age is None:
            return preferred

        band = (filters.min_age, filters.max_age)
        if preferred is None:
            return band

        low = max(band[0], preferred[0])
        high = min(band[1], preferred[1])
        return (low, high) if low <= high else band

    def _score_all(
        self,
        requester: UserProfile,
        survivors: List[Tuple[UserProfile, float]],
        max_distance: Optional[float],
        age_range: Optional[Tuple[int, int]],
        now: datetime,
        cancel_event: Optional[Event]
    ) -> List[RankedCandidate]:
        def score_one(item: Tuple[UserProfile, float]) -> RankedCandidate:
            candidate, distance = item
            self._check_cancelled(cancel_event)
            breakdown = self.scorer.score(
                requester,
                candidate,
                distance,
                max_distance_km=max_distance,
                age_range=age_range,
                now=now
            )
            return RankedCandidate(
                profile=candidate,
                score=breakdown.score,
                distance_km=distance,
                breakdown=breakdown
            )

        workers = self.config.engine.scoring_workers
        if workers <= 1 or len(survivors) < 2:
            return [score_one(item) for item in survivors]

        # map() yields in input order; ordering is settled by the sort anyway
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(score_one, survivors))
