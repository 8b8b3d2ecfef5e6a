#!/usr/bin/env python3
"""
Matching endpoints - ranked candidates and pairwise compatibility.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from ..dependencies import get_matching_service
from ..services.matching_service import MatchingService
from ..models.responses import CompatibilityResponse, MatchesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/matching", tags=["matching"])

# Bounds are checked by the engine so bad values surface as InvalidArgumentError (400)


@router.get("/users/{user_id}/potential-matches", response_model=MatchesResponse)
def get_potential_matches(
    user_id: str,
    limit: Optional[int] = Query(default=None, description="Page size"),
    page: int = Query(default=0, description="Zero-based page index"),
    service: MatchingService = Depends(get_matching_service)
):
    """
    Get ranked candidates filtered by both users' stored preferences.
    """
    return service.potential_matches(user_id, limit=limit, page=page)


@router.get("/users/{user_id}/nearby-matches", response_model=MatchesResponse)
def get_nearby_matches(
    user_id: str,
    radius_km: float = Query(..., description="Search radius in km; caps the stored max distance"),
    limit: Optional[int] = Query(default=None, description="Page size"),
    page: int = Query(default=0, description="Zero-based page index"),
    service: MatchingService = Depends(get_matching_service)
):
    """Get ranked candidates within an explicit radius."""
    return service.nearby_matches(user_id, radius_km, limit=limit, page=page)


@router.get("/users/{user_id}/age-matches", response_model=MatchesResponse)
def get_age_matches(
    user_id: str,
    min_age: int = Query(..., description="Youngest candidate age"),
    max_age: int = Query(..., description="Oldest candidate age"),
    limit: Optional[int] = Query(default=None, description="Page size"),
    page: int = Query(default=0, description="Zero-based page index"),
    service: MatchingService = Depends(get_matching_service)
):
    """Get ranked candidates inside an explicit age band."""
    return service.age_matches(user_id, min_age, max_age, limit=limit, page=page)


@router.get("/compatibility/{user_id_a}/{user_id_b}", response_model=CompatibilityResponse)
def get_compatibility(
    user_id_a: str,
    user_id_b: str,
    service: MatchingService = Depends(get_matching_service)
):
    """
    Score user B from user A's point of view.

    Exclusions and preference gates are not applied.
    """
    return service.compatibility(user_id_a, user_id_b)
