#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from core.cache import RedisCandidatePoolCache
from core.config_loader import AppConfig
from core.matching.interfaces import CandidatePoolCache
from core.matching.service import MatchingEngine
from database.repository import MatchingRepository
from .config import get_config
from .services.matching_service import MatchingService


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self, url: str):
        self.engine = create_engine(
            url,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=10,
            max_overflow=20
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """Process-wide database manager, created on first use."""
    return DatabaseManager(get_config().database.url)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from get_db_manager().get_session()


@lru_cache()
def get_candidate_cache() -> Optional[CandidatePoolCache]:
    """Redis candidate pool cache when enabled in config, else None."""
    cache_config = get_config().cache
    if not cache_config.enabled:
        return None
    return RedisCandidatePoolCache.from_config(cache_config)


def get_app_config() -> AppConfig:
    return get_config()


def get_matching_engine(
    db: Session = Depends(get_db),
    config: AppConfig = Depends(get_app_config)
) -> MatchingEngine:
    """Build a MatchingEngine over request-scoped repositories."""
    repo = MatchingRepository(db)
    return MatchingEngine(
        repo.profiles,
        repo.swipes,
        repo.blocks,
        config=config.matching,
        cache=get_candidate_cache()
    )


def get_matching_service(
    engine: MatchingEngine = Depends(get_matching_engine),
    config: AppConfig = Depends(get_app_config)
) -> MatchingService:
    return MatchingService(
        engine,
        retry_attempts=config.web.dependency_retry_attempts,
        retry_wait_seconds=config.web.dependency_retry_wait_seconds
    )
