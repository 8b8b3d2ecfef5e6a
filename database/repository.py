import logging

from sqlalchemy.orm import Session

from database.repositories import BlockRepository, ProfileRepository, SwipeHistoryRepository

logger = logging.getLogger(__name__)


class MatchingRepository:
    """
    Groups the matching stores over a single Session.

    The three attributes satisfy ProfileStore, SwipeHistoryStore and
    BlockStore respectively and can be handed straight to MatchingEngine.
    """

    def __init__(self, db: Session):
        self.db = db
        self.profiles = ProfileRepository(db)
        self.swipes = SwipeHistoryRepository(db)
        self.blocks = BlockRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
