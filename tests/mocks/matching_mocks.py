#!/usr/bin/env python3
"""
Test Mock Implementations - In-memory stores for matching tests.

These fakes implement the store interfaces with plain dicts/lists and
count calls so tests can assert on store access patterns.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from core.matching.exceptions import DependencyUnavailableError
from core.matching.interfaces import (
    BlockStore, CandidatePoolCache, ProfileStore, SwipeHistoryStore
)
from core.matching.models import (
    AccountStatus, BlockRelation, Gender, GenderPreference, Preference,
    PreferenceSpec, SwipeOutcome, SwipeRecord, UNRESTRICTED, UserIdentity,
    UserProfile, normalize_interests
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

# Manhattan-ish reference point; 1 degree of latitude is ~111.19 km
BASE_LAT = 40.7128
BASE_LON = -74.0060
KM_PER_DEGREE_LAT = 111.19492664455873


def north_of(km: float) -> float:
    """Latitude that lies `km` north of BASE_LAT along the meridian."""
    return BASE_LAT + km / KM_PER_DEGREE_LAT


def make_profile(
    user_id: str,
    age: int = 30,
    gender: Gender = Gender.FEMALE,
    latitude: float = BASE_LAT,
    longitude: float = BASE_LON,
    interests: Iterable[str] = (),
    last_active_at: Optional[datetime] = NOW,
    is_active: bool = True,
    preference: PreferenceSpec = UNRESTRICTED,
    display_name: Optional[str] = None
) -> UserProfile:
    return UserProfile(
        user_id=user_id,
        age=age,
        gender=gender,
        latitude=latitude,
        longitude=longitude,
        interests=normalize_interests(interests),
        last_active_at=last_active_at,
        is_active=is_active,
        preference=preference,
        display_name=display_name,
    )


def make_preference(
    gender: GenderPreference = GenderPreference.ANY,
    min_age: Optional[int] = None,
    max_age: Optional[int] = None,
    max_distance_km: Optional[float] = None
) -> Preference:
    return Preference(
        gender=gender, min_age=min_age, max_age=max_age, max_distance_km=max_distance_km
    )


class InMemoryProfileStore(ProfileStore):
    """ProfileStore backed by dicts."""

    def __init__(self, profiles: Iterable[UserProfile] = ()):
        self.identities: Dict[str, UserIdentity] = {}
        self.profiles: Dict[str, UserProfile] = {}
        self.calls: Dict[str, int] = {'find_identity': 0, 'find_by_id': 0, 'find_all': 0}
        self.fail_with: Optional[Exception] = None
        for profile in profiles:
            self.add(profile)

    def add(self, profile: UserProfile) -> None:
        status = AccountStatus.ACTIVE if profile.is_active else AccountStatus.INACTIVE
        self.identities[profile.user_id] = UserIdentity(profile.user_id, status)
        self.profiles[profile.user_id] = profile

    def add_identity_only(self, user_id: str) -> None:
        self.identities[user_id] = UserIdentity(user_id, AccountStatus.ACTIVE)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def find_identity(self, user_id: str) -> Optional[UserIdentity]:
        self.calls['find_identity'] += 1
        self._maybe_fail()
        return self.identities.get(user_id)

    def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        self.calls['find_by_id'] += 1
        self._maybe_fail()
        return self.profiles.get(user_id)

    def find_all(self) -> List[UserProfile]:
        self.calls['find_all'] += 1
        self._maybe_fail()
        return list(self.profiles.values())


class InMemorySwipeStore(SwipeHistoryStore):
    """Append-only swipe log."""

    def __init__(self):
        self.records: List[SwipeRecord] = []
        self.calls = 0

    def swipe(
        self,
        actor_id: str,
        target_id: str,
        outcome: SwipeOutcome = SwipeOutcome.LIKE,
        is_rewind: bool = False
    ) -> None:
        self.records.append(
            SwipeRecord(actor_id, target_id, outcome, created_at=NOW, is_rewind=is_rewind)
        )

    def has_swiped(self, actor_id: str, target_id: str, include_rewound: bool = True) -> bool:
        self.calls += 1
        return target_id in self._targets(actor_id, include_rewound)

    def swiped_target_ids(self, actor_id: str, include_rewound: bool = True) -> Set[str]:
        self.calls += 1
        return self._targets(actor_id, include_rewound)

    def _targets(self, actor_id: str, include_rewound: bool) -> Set[str]:
        return {
            r.target_id for r in self.records
            if r.actor_id == actor_id and (include_rewound or not r.is_rewind)
        }


class InMemoryBlockStore(BlockStore):
    """Block relations, honored in both directions."""

    def __init__(self):
        self.relations: List[BlockRelation] = []
        self.calls = 0

    def block(self, blocker_id: str, blocked_id: str) -> None:
        self.relations.append(BlockRelation(blocker_id, blocked_id, blocked_at=NOW))

    def is_blocked(self, user_a: str, user_b: str) -> bool:
        self.calls += 1
        return any(
            {r.blocker_id, r.blocked_id} == {user_a, user_b} for r in self.relations
        )

    def blocked_user_ids(self, user_id: str) -> Set[str]:
        self.calls += 1
        result = set()
        for r in self.relations:
            if r.blocker_id == user_id:
                result.add(r.blocked_id)
            elif r.blocked_id == user_id:
                result.add(r.blocker_id)
        return result


class InMemoryPoolCache(CandidatePoolCache):
    """Dict-backed cache that records hits and writes."""

    def __init__(self):
        self.pool: Optional[List[UserProfile]] = None
        self.gets = 0
        self.sets = 0

    def get_pool(self) -> Optional[List[UserProfile]]:
        self.gets += 1
        return list(self.pool) if self.pool is not None else None

    def set_pool(self, profiles: List[UserProfile]) -> bool:
        self.sets += 1
        self.pool = list(profiles)
        return True

    def invalidate(self) -> bool:
        self.pool = None
        return True


class FlakyProfileStore(InMemoryProfileStore):
    """Raises DependencyUnavailableError for the first `failures` identity lookups."""

    def __init__(self, profiles: Iterable[UserProfile] = (), failures: int = 1):
        super().__init__(profiles)
        self.remaining_failures = failures

    def find_identity(self, user_id: str) -> Optional[UserIdentity]:
        if self.remaining_failures > 0:
            self.remaining_failures -= 1
            self.calls['find_identity'] += 1
            raise DependencyUnavailableError("profile store timed out")
        return super().find_identity(user_id)
