#!/usr/bin/env python3
"""
Matching Models - Data structures for candidate matching.
"""

from dataclasses import dataclass, field
from datetime import datetime, date, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

MIN_PREFERENCE_AGE = 18
MAX_PREFERENCE_AGE = 100
MAX_PREFERENCE_DISTANCE_KM = 1000.0


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    NON_BINARY = "NON_BINARY"
    OTHER = "OTHER"


class GenderPreference(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    NON_BINARY = "NON_BINARY"
    OTHER = "OTHER"
    ANY = "ANY"

    @classmethod
    def parse(cls, value: Optional[str]) -> "GenderPreference":
        """Parse a stored preference value. Empty and legacy BOTH mean ANY."""
        if not value:
            return cls.ANY
        normalized = value.strip().upper()
        if normalized == "BOTH":
            return cls.ANY
        return cls(normalized)


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    DELETED = "DELETED"


class SwipeOutcome(str, Enum):
    LIKE = "LIKE"
    DISLIKE = "DISLIKE"
    SUPER_LIKE = "SUPER_LIKE"
    PASS = "PASS"


def normalize_interests(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Strip and lower-case interest tags, dropping blanks."""
    if not values:
        return frozenset()
    return frozenset(v.strip().lower() for v in values if v and v.strip())


def age_from_dob(dob: date, today: Optional[date] = None) -> int:
    """Whole years between date of birth and today."""
    today = today or datetime.now(timezone.utc).date()
    return relativedelta(today, dob).years


@dataclass(frozen=True)
class Preference:
    """A user's stated requirements for candidates.

    Each bound is optional; an unset bound does not restrict.
    """
    gender: GenderPreference = GenderPreference.ANY
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    max_distance_km: Optional[float] = None

    @property
    def has_age_range(self) -> bool:
        return self.min_age is not None and self.max_age is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'preference',
            'gender': self.gender.value,
            'min_age': self.min_age,
            'max_age': self.max_age,
            'max_distance_km': self.max_distance_km,
        }


@dataclass(frozen=True)
class Unrestricted:
    """No preference recorded: matches everyone and is matched by everyone."""

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'unrestricted'}


UNRESTRICTED = Unrestricted()

PreferenceSpec = Union[Preference, Unrestricted]


def preference_from_dict(data: Optional[Dict[str, Any]]) -> PreferenceSpec:
    if not data or data.get('type') == 'unrestricted':
        return UNRESTRICTED
    return Preference(
        gender=GenderPreference.parse(data.get('gender')),
        min_age=data.get('min_age'),
        max_age=data.get('max_age'),
        max_distance_km=data.get('max_distance_km'),
    )


@dataclass(frozen=True)
class UserIdentity:
    """Stable identifier for a person plus account status."""
    user_id: str
    status: AccountStatus = AccountStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE


@dataclass(frozen=True)
class UserProfile:
    """Attributes of a user that take part in matching."""
    user_id: str
    age: int
    gender: Gender
    latitude: float
    longitude: float
    interests: FrozenSet[str] = frozenset()
    last_active_at: Optional[datetime] = None
    is_active: bool = True
    preference: PreferenceSpec = UNRESTRICTED
    display_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user_id': self.user_id,
            'display_name': self.display_name,
            'age': self.age,
            'gender': self.gender.value,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'interests': sorted(self.interests),
            'last_active_at': self.last_active_at.isoformat() if self.last_active_at else None,
            'is_active': self.is_active,
            'preference': self.preference.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        last_active = data.get('last_active_at')
        return cls(
            user_id=data['user_id'],
            display_name=data.get('display_name'),
            age=int(data['age']),
            gender=Gender(data['gender']),
            latitude=float(data['latitude']),
            longitude=float(data['longitude']),
            interests=normalize_interests(data.get('interests')),
            last_active_at=isoparse(last_active) if last_active else None,
            is_active=data.get('is_active', True),
            preference=preference_from_dict(data.get('preference')),
        )


@dataclass(frozen=True)
class SwipeRecord:
    """An append-only fact: actor swiped on target with an outcome."""
    actor_id: str
    target_id: str
    outcome: SwipeOutcome
    created_at: datetime
    is_rewind: bool = False


@dataclass(frozen=True)
class BlockRelation:
    """blocker excludes blocked from all interaction, in both directions."""
    blocker_id: str
    blocked_id: str
    blocked_at: datetime
    reason: Optional[str] = None


@dataclass(frozen=True)
class CandidateFilters:
    """Caller-supplied overrides layered on top of preference filters.

    They narrow the preference-derived candidate set and never widen it.
    """
    radius_km: Optional[float] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None


@dataclass
class ScoreBreakdown:
    """Sub-scores, the weights applied, and the clamped final score."""
    distance: float
    interests: float
    age: float
    recency: float
    weights: Dict[str, float] = field(default_factory=dict)
    score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'distance': self.distance,
            'interests': self.interests,
            'age': self.age,
            'recency': self.recency,
            'weights': dict(self.weights),
            'score': self.score,
        }


@dataclass
class RankedCandidate:
    """Transient ranking result. Recomputed per request, never persisted."""
    profile: UserProfile
    score: float
    distance_km: float
    breakdown: Optional[ScoreBreakdown] = None
