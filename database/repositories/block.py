import logging
from typing import Optional, Set

from sqlalchemy import or_, and_, select

from core.matching.interfaces import BlockStore
from database.models import BlockedUser
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class BlockRepository(BaseRepository, BlockStore):
    def is_blocked(self, user_a: str, user_b: str) -> bool:
        stmt = select(BlockedUser.id).where(
            or_(
                and_(BlockedUser.blocker_id == user_a, BlockedUser.blocked_id == user_b),
                and_(BlockedUser.blocker_id == user_b, BlockedUser.blocked_id == user_a),
            )
        ).limit(1)
        with self._unavailable_on_db_error("is_blocked"):
            return self.db.execute(stmt).first() is not None

    def blocked_user_ids(self, user_id: str) -> Set[str]:
        stmt = select(BlockedUser.blocker_id, BlockedUser.blocked_id).where(
            or_(BlockedUser.blocker_id == user_id, BlockedUser.blocked_id == user_id)
        )
        with self._unavailable_on_db_error("blocked_user_ids"):
            rows = self.db.execute(stmt).all()
        return {
            blocked if blocker == user_id else blocker
            for blocker, blocked in rows
        }

    def block(self, blocker_id: str, blocked_id: str, reason: Optional[str] = None) -> BlockedUser:
        existing = self.db.execute(
            select(BlockedUser).where(
                BlockedUser.blocker_id == blocker_id,
                BlockedUser.blocked_id == blocked_id
            )
        ).scalar_one_or_none()
        if existing is not None:
            return existing

        relation = BlockedUser(blocker_id=blocker_id, blocked_id=blocked_id, reason=reason)
        self.db.add(relation)
        self.db.flush()
        logger.info(f"User {blocker_id} blocked {blocked_id}")
        return relation
