from .base import Base
from .user import User
from .profile import Profile, ProfilePreference, Interest, profile_interests
from .swipe import SwipeHistory
from .block import BlockedUser

__all__ = [
    'Base',
    'User',
    'Profile',
    'ProfilePreference',
    'Interest',
    'profile_interests',
    'SwipeHistory',
    'BlockedUser',
]
