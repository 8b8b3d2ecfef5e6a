#!/usr/bin/env python3
"""
Geo Distance Calculator - Great-circle distance between coordinates.
"""
import math

from core.matching.models import UserProfile

EARTH_RADIUS_KM = 6371.0


class GeoDistanceCalculator:
    """Calculate haversine distance in kilometers."""

    @staticmethod
    def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """
        Calculate the great-circle surface distance between two points.

        Coordinates are decimal degrees and are not range-checked here;
        out-of-range input gives a defined but meaningless result.

        Args:
            lat1: Latitude of the first point
            lon1: Longitude of the first point
            lat2: Latitude of the second point
            lon2: Longitude of the second point

        Returns:
            Distance in kilometers (0.0 for identical coordinates)
        """
        if lat1 == lat2 and lon1 == lon2:
            return 0.0

        phi1 = math.radians(lat1)
        phi2 = math.radians(lat2)
        d_phi = math.radians(lat2 - lat1)
        d_lambda = math.radians(lon2 - lon1)

        a = (
            math.sin(d_phi / 2) ** 2
            + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
        )
        # Rounding can push a marginally above 1 for antipodal points
        a = min(1.0, max(0.0, a))
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_KM * c

    @classmethod
    def between(cls, a: UserProfile, b: UserProfile) -> float:
        """Distance between two profiles' coordinates."""
        return cls.distance_km(a.latitude, a.longitude, b.latitude, b.longitude)
