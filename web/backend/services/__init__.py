"""Business logic services."""

from .matching_service import MatchingService
