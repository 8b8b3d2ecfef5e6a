from sqlalchemy import (
    Column, Text, Integer, Float, Date, TIMESTAMP, ForeignKey, Table, Index, func
)
from sqlalchemy.orm import relationship

from .base import Base


profile_interests = Table(
    'profile_interests',
    Base.metadata,
    Column('profile_id', Integer, ForeignKey('user_profiles.id', ondelete='CASCADE'), primary_key=True),
    Column('interest_id', Integer, ForeignKey('interests.id', ondelete='CASCADE'), primary_key=True),
)


class Interest(Base):
    """Interest tag shared across profiles."""
    __tablename__ = 'interests'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)


class Profile(Base):
    """
    Matching-relevant profile attributes owned by a single user.

    Age is derived from dob when present; the stored age column is a fallback
    for profiles imported without a date of birth.
    """
    __tablename__ = 'user_profiles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)

    dob = Column(Date)
    age = Column(Integer)
    gender = Column(Text, nullable=False)

    latitude = Column(Float)
    longitude = Column(Float)

    last_seen = Column(TIMESTAMP(timezone=True))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile", lazy="selectin")
    interests = relationship("Interest", secondary=profile_interests, lazy="selectin")
    preference = relationship(
        "ProfilePreference",
        back_populates="profile",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index('idx_user_profiles_location', 'latitude', 'longitude'),
    )


class ProfilePreference(Base):
    """
    A profile's stated candidate requirements. Absent row = unrestricted.
    """
    __tablename__ = 'preferences'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_profile_id = Column(Integer, ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False, unique=True)

    # MALE, FEMALE, NON_BINARY, OTHER, ANY (legacy BOTH == ANY)
    gender_preference = Column(Text)
    age_min = Column(Integer)
    age_max = Column(Integer)
    max_distance = Column(Integer)  # km

    profile = relationship("Profile", back_populates="preference")
