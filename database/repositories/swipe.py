import logging
from datetime import datetime, timezone
from typing import Optional, Set

from sqlalchemy import select

from core.matching.interfaces import SwipeHistoryStore
from core.matching.models import SwipeOutcome
from database.models import SwipeHistory
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class SwipeHistoryRepository(BaseRepository, SwipeHistoryStore):
    def has_swiped(self, actor_id: str, target_id: str, include_rewound: bool = True) -> bool:
        stmt = select(SwipeHistory.id).where(
            SwipeHistory.user_id == actor_id,
            SwipeHistory.target_user_id == target_id
        )
        if not include_rewound:
            stmt = stmt.where(SwipeHistory.is_rewind.is_(False))
        with self._unavailable_on_db_error("has_swiped"):
            return self.db.execute(stmt.limit(1)).first() is not None

    def swiped_target_ids(self, actor_id: str, include_rewound: bool = True) -> Set[str]:
        stmt = select(SwipeHistory.target_user_id).where(SwipeHistory.user_id == actor_id)
        if not include_rewound:
            stmt = stmt.where(SwipeHistory.is_rewind.is_(False))
        with self._unavailable_on_db_error("swiped_target_ids"):
            return set(self.db.execute(stmt.distinct()).scalars().all())

    def record_swipe(
        self,
        actor_id: str,
        target_id: str,
        outcome: SwipeOutcome,
        created_at: Optional[datetime] = None
    ) -> SwipeHistory:
        swipe = SwipeHistory(
            user_id=actor_id,
            target_user_id=target_id,
            swipe_type=outcome.value,
            is_rewind=False,
            created_at=created_at or datetime.now(timezone.utc)
        )
        self.db.add(swipe)
        self.db.flush()
        return swipe

    def mark_rewound(self, actor_id: str, target_id: str) -> int:
        """Flag the actor's latest swipe on target as rewound. Returns rows updated."""
        stmt = (
            select(SwipeHistory)
            .where(
                SwipeHistory.user_id == actor_id,
                SwipeHistory.target_user_id == target_id,
                SwipeHistory.is_rewind.is_(False)
            )
            .order_by(SwipeHistory.created_at.desc(), SwipeHistory.id.desc())
            .limit(1)
        )
        latest = self.db.execute(stmt).scalar_one_or_none()
        if latest is None:
            return 0
        latest.is_rewind = True
        self.db.flush()
        return 1
