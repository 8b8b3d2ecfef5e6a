from sqlalchemy import Column, Text, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, Index, func

from .base import Base


class BlockedUser(Base):
    """
    blocker excludes blocked from all interaction. Honored in both directions.
    """
    __tablename__ = 'blocked_users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    blocker_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    blocked_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    reason = Column(Text)
    blocked_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('blocker_id', 'blocked_id', name='uq_blocked_users_pair'),
        Index('idx_blocked_users_blocked', 'blocked_id'),
    )
