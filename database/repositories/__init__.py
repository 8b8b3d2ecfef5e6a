from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.swipe import SwipeHistoryRepository
from database.repositories.block import BlockRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'SwipeHistoryRepository',
    'BlockRepository',
]
