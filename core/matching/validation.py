"""
Input validation for profiles and candidate queries.

Values are checked, never clamped: anything out of range is a hard input
error for the request.
"""
import math
from typing import Optional

from core.matching.exceptions import InvalidArgumentError, InvalidProfileError
from core.matching.models import (
    CandidateFilters, Preference, UserProfile,
    MIN_PREFERENCE_AGE, MAX_PREFERENCE_AGE, MAX_PREFERENCE_DISTANCE_KM
)

MIN_PROFILE_AGE = 18
MAX_PROFILE_AGE = 120


def validate_preference(owner_id: str, preference: Preference) -> None:
    for label, value in (('min_age', preference.min_age), ('max_age', preference.max_age)):
        if value is not None and not (MIN_PREFERENCE_AGE <= value <= MAX_PREFERENCE_AGE):
            raise InvalidProfileError(
                f"Preference {label} for user {owner_id} must be between "
                f"{MIN_PREFERENCE_AGE} and {MAX_PREFERENCE_AGE}, got {value}"
            )
    if preference.has_age_range and preference.min_age > preference.max_age:
        raise InvalidProfileError(
            f"Preference age range for user {owner_id} is inverted: "
            f"{preference.min_age} > {preference.max_age}"
        )
    if preference.max_distance_km is not None and not (
        0 < preference.max_distance_km <= MAX_PREFERENCE_DISTANCE_KM
    ):
        raise InvalidProfileError(
            f"Preference max distance for user {owner_id} must be in "
            f"(0, {MAX_PREFERENCE_DISTANCE_KM:g}], got {preference.max_distance_km}"
        )


def validate_profile(profile: UserProfile) -> None:
    """Raise InvalidProfileError if age, coordinates or preference are out of range."""
    if not (MIN_PROFILE_AGE <= profile.age <= MAX_PROFILE_AGE):
        raise InvalidProfileError(
            f"Age for user {profile.user_id} must be between "
            f"{MIN_PROFILE_AGE} and {MAX_PROFILE_AGE}, got {profile.age}"
        )
    if not (-90.0 <= profile.latitude <= 90.0):
        raise InvalidProfileError(
            f"Latitude for user {profile.user_id} must be between -90 and 90, got {profile.latitude}"
        )
    if not (-180.0 <= profile.longitude <= 180.0):
        raise InvalidProfileError(
            f"Longitude for user {profile.user_id} must be between -180 and 180, got {profile.longitude}"
        )
    if isinstance(profile.preference, Preference):
        validate_preference(profile.user_id, profile.preference)


def validate_query(
    filters: CandidateFilters,
    page_size: int,
    page: int = 0,
    max_page_size: Optional[int] = None
) -> None:
    """Reject malformed paging or filter bounds before any store access."""
    if page_size <= 0:
        raise InvalidArgumentError(f"page_size must be positive, got {page_size}")
    if max_page_size is not None and page_size > max_page_size:
        raise InvalidArgumentError(f"page_size must not exceed {max_page_size}, got {page_size}")
    if page < 0:
        raise InvalidArgumentError(f"page must not be negative, got {page}")

    if filters.radius_km is not None and (not math.isfinite(filters.radius_km) or filters.radius_km <= 0):
        raise InvalidArgumentError(f"radius_km must be a positive finite number, got {filters.radius_km}")

    for label, value in (('min_age', filters.min_age), ('max_age', filters.max_age)):
        if value is not None and value < 0:
            raise InvalidArgumentError(f"{label} must not be negative, got {value}")

    if (
        filters.min_age is not None
        and filters.max_age is not None
        and filters.min_age > filters.max_age
    ):
        raise InvalidArgumentError(
            f"Age band is inverted: min_age {filters.min_age} > max_age {filters.max_age}"
        )
