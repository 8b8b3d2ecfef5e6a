"""Matching Module - Candidate eligibility, exclusion and ranking.

The engine itself lives in core.matching.service (MatchingEngine); it is
not re-exported here because it depends on core.scorer, which in turn
imports the models below.
"""
from core.matching.models import (
    Gender, GenderPreference, AccountStatus, SwipeOutcome,
    Preference, Unrestricted, UNRESTRICTED, UserIdentity, UserProfile,
    SwipeRecord, BlockRelation, CandidateFilters, ScoreBreakdown, RankedCandidate
)
from core.matching.exceptions import (
    MatchingError, NotFoundError, UserNotFoundError, ProfileNotFoundError,
    InvalidArgumentError, InvalidProfileError, DependencyUnavailableError,
    MatchingCancelledError
)
from core.matching.interfaces import (
    ProfileStore, SwipeHistoryStore, BlockStore, CandidatePoolCache
)
from core.matching.geo import GeoDistanceCalculator
from core.matching.preference_compatibility import PreferenceCompatibility
from core.matching.exclusion import ExclusionResolver, ExclusionSet

__all__ = [
    'Gender', 'GenderPreference', 'AccountStatus', 'SwipeOutcome',
    'Preference', 'Unrestricted', 'UNRESTRICTED', 'UserIdentity', 'UserProfile',
    'SwipeRecord', 'BlockRelation', 'CandidateFilters', 'ScoreBreakdown', 'RankedCandidate',
    'MatchingError', 'NotFoundError', 'UserNotFoundError', 'ProfileNotFoundError',
    'InvalidArgumentError', 'InvalidProfileError', 'DependencyUnavailableError',
    'MatchingCancelledError',
    'ProfileStore', 'SwipeHistoryStore', 'BlockStore', 'CandidatePoolCache',
    'GeoDistanceCalculator', 'PreferenceCompatibility', 'ExclusionResolver', 'ExclusionSet',
]
