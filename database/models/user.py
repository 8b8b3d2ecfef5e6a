import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    """
    User account identity. Authentication fields live outside the matching core.
    """
    __tablename__ = 'users'

    id = Column(Text, primary_key=True, default=lambda: str(uuid.uuid4()))
    display_name = Column(Text)

    # ACTIVE, INACTIVE, SUSPENDED, DELETED
    status = Column(Text, nullable=False, default='ACTIVE')

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_users_status', 'status'),
    )
