"""
Store Interfaces - Abstract collaborators the matching engine reads through.

Implementations live in database/repositories (SQLAlchemy) and
core/cache (Redis). Any failure of the backing service should surface as
DependencyUnavailableError.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from core.matching.models import UserIdentity, UserProfile


class ProfileStore(ABC):
    """
    Read access to user identities and profiles.
    """

    @abstractmethod
    def find_identity(self, user_id: str) -> Optional[UserIdentity]:
        """Return the identity for user_id, or None if unknown."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        """Return the profile owned by user_id, or None if it has none."""
        pass

    @abstractmethod
    def find_all(self) -> Iterable[UserProfile]:
        """
        Return the candidate pool: all active profiles.

        Implementations may pre-filter with a geographic or attribute index.
        """
        pass


class SwipeHistoryStore(ABC):

    @abstractmethod
    def has_swiped(self, actor_id: str, target_id: str, include_rewound: bool = True) -> bool:
        """True if any swipe record exists from actor to target."""
        pass

    @abstractmethod
    def swiped_target_ids(self, actor_id: str, include_rewound: bool = True) -> Set[str]:
        """All targets the actor has swiped on, fetched in one call."""
        pass


class BlockStore(ABC):

    @abstractmethod
    def is_blocked(self, user_a: str, user_b: str) -> bool:
        """True if a block exists between the pair in either direction."""
        pass

    @abstractmethod
    def blocked_user_ids(self, user_id: str) -> Set[str]:
        """Everyone user_id blocked plus everyone who blocked user_id."""
        pass


class CandidatePoolCache(ABC):
    """
    Cache for the candidate pool with a defined TTL.

    get_pool returns None on a miss. Implementations must not raise on
    cache backend failures; the engine falls back to the ProfileStore.
    """

    @abstractmethod
    def get_pool(self) -> Optional[List[UserProfile]]:
        pass

    @abstractmethod
    def set_pool(self, profiles: List[UserProfile]) -> bool:
        pass

    @abstractmethod
    def invalidate(self) -> bool:
        pass
