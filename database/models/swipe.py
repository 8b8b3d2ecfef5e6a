from sqlalchemy import Column, Text, Integer, Boolean, TIMESTAMP, ForeignKey, Index, func

from .base import Base


class SwipeHistory(Base):
    """
    Append-only swipe log: user swiped on target_user with swipe_type.

    Several rows may exist for the same pair (e.g. after a rewind).
    """
    __tablename__ = 'swipe_history'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    target_user_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    # LIKE, DISLIKE, SUPER_LIKE, PASS
    swipe_type = Column(Text, nullable=False)
    is_rewind = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_swipe_history_user_target', 'user_id', 'target_user_id'),
    )
