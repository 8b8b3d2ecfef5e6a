#!/usr/bin/env python3
"""
Exclusion Resolver - Remove candidates before scoring.

A candidate is excluded when it is the requester, when a block exists in
either direction, or when the requester has already swiped on it. Checks
run in that fixed order so the cheap identity check short-circuits the
store lookups.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional
import logging

from core.config_loader import ExclusionConfig
from core.matching.interfaces import BlockStore, SwipeHistoryStore

logger = logging.getLogger(__name__)

REASON_SELF = "self"
REASON_BLOCKED = "blocked"
REASON_SWIPED = "swiped"


@dataclass(frozen=True)
class ExclusionSet:
    """Exclusion state for one requester, bulk-fetched once per request."""
    requester_id: str
    blocked_ids: FrozenSet[str] = field(default_factory=frozenset)
    swiped_ids: FrozenSet[str] = field(default_factory=frozenset)

    def reason(self, candidate_id: str) -> Optional[str]:
        if candidate_id == self.requester_id:
            return REASON_SELF
        if candidate_id in self.blocked_ids:
            return REASON_BLOCKED
        if candidate_id in self.swiped_ids:
            return REASON_SWIPED
        return None

    def excludes(self, candidate_id: str) -> bool:
        return self.reason(candidate_id) is not None


class ExclusionResolver:
    """Decide whether a candidate must be removed from consideration."""

    def __init__(
        self,
        swipe_store: SwipeHistoryStore,
        block_store: BlockStore,
        config: Optional[ExclusionConfig] = None
    ):
        self.swipe_store = swipe_store
        self.block_store = block_store
        self.config = config or ExclusionConfig()

    @property
    def include_rewound(self) -> bool:
        return self.config.rewound_swipes_exclude

    def reason(self, requester_id: str, candidate_id: str) -> Optional[str]:
        """
        Per-pair check against the stores.

        Returns the rule that excludes the candidate, or None.
        """
        if candidate_id == requester_id:
            return REASON_SELF
        if self.block_store.is_blocked(requester_id, candidate_id):
            return REASON_BLOCKED
        if self.swipe_store.has_swiped(requester_id, candidate_id, include_rewound=self.include_rewound):
            return REASON_SWIPED
        return None

    def is_excluded(self, requester_id: str, candidate_id: str) -> bool:
        return self.reason(requester_id, candidate_id) is not None

    def snapshot(self, requester_id: str) -> ExclusionSet:
        """
        Bulk-fetch block and swipe relations for the requester.

        One call per store instead of one per candidate.
        """
        blocked = frozenset(self.block_store.blocked_user_ids(requester_id))
        swiped = frozenset(
            self.swipe_store.swiped_target_ids(requester_id, include_rewound=self.include_rewound)
        )
        logger.debug(
            f"Exclusion snapshot for {requester_id}: "
            f"{len(blocked)} blocked, {len(swiped)} swiped"
        )
        return ExclusionSet(requester_id=requester_id, blocked_ids=blocked, swiped_ids=swiped)
