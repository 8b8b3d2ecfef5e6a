"""Cache Module - Caching services."""
from core.cache.candidate_cache import (
    RedisCandidatePoolCache,
    DEFAULT_TTL_SECONDS
)

__all__ = [
    'RedisCandidatePoolCache',
    'DEFAULT_TTL_SECONDS'
]
