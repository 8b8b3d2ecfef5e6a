import contextlib
import logging

from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from core.matching.exceptions import DependencyUnavailableError

logger = logging.getLogger(__name__)


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    @contextlib.contextmanager
    def _unavailable_on_db_error(self, operation: str):
        """Surface connection-level database failures as DependencyUnavailableError."""
        try:
            yield
        except (OperationalError, InterfaceError, PoolTimeoutError) as e:
            logger.error(f"Database unavailable during {operation}: {e}")
            raise DependencyUnavailableError(f"Database unavailable during {operation}") from e
