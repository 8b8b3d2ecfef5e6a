#!/usr/bin/env python3
"""
Preference Compatibility - Hard eligibility checks between two users.

A candidate is eligible only when the requester's preference is satisfied
by the candidate AND the candidate's preference is satisfied by the
requester. Unrestricted on either side is satisfied by anyone.
"""
from typing import Optional
import logging

from core.matching.models import (
    Gender, GenderPreference, Preference, PreferenceSpec, Unrestricted, UserProfile
)

logger = logging.getLogger(__name__)


class PreferenceCompatibility:
    """Evaluate gender, age and distance preferences in both directions."""

    @staticmethod
    def gender_satisfies(candidate_gender: Gender, preference: PreferenceSpec) -> bool:
        if isinstance(preference, Unrestricted):
            return True
        if preference.gender == GenderPreference.ANY:
            return True
        return preference.gender.value == candidate_gender.value

    @staticmethod
    def age_satisfies(candidate_age: int, preference: PreferenceSpec) -> bool:
        if isinstance(preference, Unrestricted):
            return True
        if preference.min_age is not None and candidate_age < preference.min_age:
            return False
        if preference.max_age is not None and candidate_age > preference.max_age:
            return False
        return True

    @staticmethod
    def distance_satisfies(distance_km: float, preference: PreferenceSpec) -> bool:
        if isinstance(preference, Unrestricted):
            return True
        if preference.max_distance_km is None:
            return True
        return distance_km <= preference.max_distance_km

    @classmethod
    def satisfies(
        cls,
        preference: PreferenceSpec,
        other: UserProfile,
        distance_km: Optional[float] = None
    ) -> bool:
        """
        Check whether `other` satisfies the owner's preference.

        Distance is skipped when not supplied.
        """
        if not cls.gender_satisfies(other.gender, preference):
            return False
        if not cls.age_satisfies(other.age, preference):
            return False
        if distance_km is not None and not cls.distance_satisfies(distance_km, preference):
            return False
        return True

    @classmethod
    def mutually_compatible(
        cls,
        requester: UserProfile,
        candidate: UserProfile,
        distance_km: Optional[float] = None
    ) -> bool:
        """Both parties' preferences are satisfied by each other."""
        if not cls.satisfies(requester.preference, candidate, distance_km):
            return False
        return cls.satisfies(candidate.preference, requester, distance_km)
