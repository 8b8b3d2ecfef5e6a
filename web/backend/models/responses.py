#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict


class PreferenceResponse(BaseModel):
    """A candidate's stated preference, or unrestricted."""
    unrestricted: bool
    gender: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    max_distance_km: Optional[float] = None


class CandidateProfile(BaseModel):
    """Public view of a matched user's profile."""
    user_id: str
    display_name: Optional[str] = None
    age: int
    gender: str
    latitude: float
    longitude: float
    interests: List[str] = Field(default_factory=list)
    last_active_at: Optional[datetime] = None
    preference: PreferenceResponse


class ScoreBreakdownResponse(BaseModel):
    """Per-factor sub-scores and the weights that combined them."""
    distance: float = Field(ge=0, le=1)
    interests: float = Field(ge=0, le=1)
    age: float = Field(ge=0, le=1)
    recency: float = Field(ge=0, le=1)
    weights: Dict[str, float]


class MatchCandidate(BaseModel):
    """A single ranked candidate."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "candidate_profile": {
                    "user_id": "u-42",
                    "display_name": "Sam",
                    "age": 29,
                    "gender": "FEMALE",
                    "latitude": 40.7128,
                    "longitude": -74.0060,
                    "interests": ["climbing", "jazz"],
                    "last_active_at": "2026-02-01T12:00:00Z",
                    "preference": {"unrestricted": True}
                },
                "compatibility_score": 0.82,
                "distance_km": 3.4,
                "score_breakdown": {
                    "distance": 0.93,
                    "interests": 0.5,
                    "age": 0.9,
                    "recency": 0.97,
                    "weights": {"distance": 0.3, "interests": 0.3, "age": 0.2, "recency": 0.2}
                }
            }
        }
    )

    candidate_profile: CandidateProfile
    compatibility_score: float = Field(ge=0, le=1)
    distance_km: float = Field(ge=0)
    score_breakdown: Optional[ScoreBreakdownResponse] = None


class MatchesResponse(BaseModel):
    """Response for candidate list endpoints."""
    success: bool = True
    user_id: str
    page: int
    page_size: int
    count: int
    matches: List[MatchCandidate]


class CompatibilityResponse(BaseModel):
    """Response for the pairwise compatibility endpoint."""
    success: bool = True
    user_id: str
    match: MatchCandidate
