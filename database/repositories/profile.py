import logging
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import select

from core.matching.exceptions import InvalidProfileError
from core.matching.interfaces import ProfileStore
from core.matching.models import (
    AccountStatus, Gender, GenderPreference, Preference, PreferenceSpec,
    UNRESTRICTED, UserIdentity, UserProfile, age_from_dob, normalize_interests
)
from database.models import Interest, Profile, ProfilePreference, User
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_gender(row: Profile) -> Gender:
    try:
        return Gender((row.gender or "").strip().upper())
    except ValueError as e:
        raise InvalidProfileError(f"Unknown gender {row.gender!r} for user {row.user_id}") from e


def preference_from_row(row: Optional[ProfilePreference]) -> PreferenceSpec:
    if row is None:
        return UNRESTRICTED
    try:
        gender = GenderPreference.parse(row.gender_preference)
    except ValueError as e:
        raise InvalidProfileError(
            f"Unknown gender preference {row.gender_preference!r} for profile {row.user_profile_id}"
        ) from e
    return Preference(
        gender=gender,
        min_age=row.age_min,
        max_age=row.age_max,
        max_distance_km=float(row.max_distance) if row.max_distance is not None else None,
    )


def profile_from_row(row: Profile, today: Optional[date] = None) -> UserProfile:
    """Convert an ORM profile into the matching domain model."""
    if row.dob is not None:
        age = age_from_dob(row.dob, today)
    elif row.age is not None:
        age = row.age
    else:
        raise InvalidProfileError(f"Profile for user {row.user_id} has neither dob nor age")

    if row.latitude is None or row.longitude is None:
        raise InvalidProfileError(f"User location not set for user {row.user_id}")

    user = row.user
    return UserProfile(
        user_id=row.user_id,
        display_name=user.display_name if user else None,
        age=age,
        gender=_parse_gender(row),
        latitude=float(row.latitude),
        longitude=float(row.longitude),
        interests=normalize_interests(i.name for i in row.interests),
        last_active_at=_as_utc(row.last_seen),
        is_active=(user is None or user.status == AccountStatus.ACTIVE.value),
        preference=preference_from_row(row.preference),
    )


class ProfileRepository(BaseRepository, ProfileStore):
    def find_identity(self, user_id: str) -> Optional[UserIdentity]:
        with self._unavailable_on_db_error("find_identity"):
            user = self.db.get(User, user_id)
        if user is None:
            return None
        try:
            status = AccountStatus(user.status)
        except ValueError as e:
            raise InvalidProfileError(f"Unknown account status {user.status!r} for user {user.id}") from e
        return UserIdentity(user_id=user.id, status=status)

    def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        stmt = select(Profile).where(Profile.user_id == user_id)
        with self._unavailable_on_db_error("find_by_id"):
            row = self.db.execute(stmt).scalar_one_or_none()
            if row is None:
                return None
            return profile_from_row(row)

    def find_all(self) -> Iterable[UserProfile]:
        """All active users' profiles that have a location set."""
        stmt = (
            select(Profile)
            .join(User, User.id == Profile.user_id)
            .where(
                User.status == AccountStatus.ACTIVE.value,
                Profile.latitude.is_not(None),
                Profile.longitude.is_not(None),
            )
            .order_by(Profile.user_id)
        )
        today = datetime.now(timezone.utc).date()
        profiles = []
        with self._unavailable_on_db_error("find_all"):
            for row in self.db.execute(stmt).scalars().all():
                try:
                    profiles.append(profile_from_row(row, today))
                except InvalidProfileError as e:
                    logger.warning(f"Skipping stored profile for {row.user_id}: {e}")
        return profiles

    def get_or_create_interests(self, names: Iterable[str]) -> List[Interest]:
        wanted = sorted(normalize_interests(names))
        if not wanted:
            return []
        existing = {
            i.name: i
            for i in self.db.execute(select(Interest).where(Interest.name.in_(wanted))).scalars().all()
        }
        result = []
        for name in wanted:
            interest = existing.get(name)
            if interest is None:
                interest = Interest(name=name)
                self.db.add(interest)
            result.append(interest)
        return result

    def save_profile(self, profile: UserProfile, dob: Optional[date] = None) -> Profile:
        """Create or replace the user and profile rows for a domain profile."""
        user = self.db.get(User, profile.user_id)
        if user is None:
            user = User(id=profile.user_id)
            self.db.add(user)
        user.display_name = profile.display_name
        user.status = AccountStatus.ACTIVE.value if profile.is_active else AccountStatus.INACTIVE.value

        row = self.db.execute(
            select(Profile).where(Profile.user_id == profile.user_id)
        ).scalar_one_or_none()
        if row is None:
            row = Profile(user_id=profile.user_id)
            self.db.add(row)

        row.dob = dob
        row.age = profile.age
        row.gender = profile.gender.value
        row.latitude = profile.latitude
        row.longitude = profile.longitude
        row.last_seen = profile.last_active_at
        row.interests = self.get_or_create_interests(profile.interests)

        pref = profile.preference
        if isinstance(pref, Preference):
            # Update in place; swapping the row would trip the unique user_profile_id
            if row.preference is None:
                row.preference = ProfilePreference()
            row.preference.gender_preference = pref.gender.value
            row.preference.age_min = pref.min_age
            row.preference.age_max = pref.max_age
            row.preference.max_distance = (
                int(pref.max_distance_km) if pref.max_distance_km is not None else None
            )
        else:
            row.preference = None

        self.db.flush()
        return row
