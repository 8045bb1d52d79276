"""Verification service - geofenced on-site checks."""

from edqorta.services.verification.geofence import (
    EARTH_RADIUS_METERS,
    GEOFENCE_RADIUS_METERS,
    haversine_distance,
    within_geofence,
)
from edqorta.services.verification.workflow import VerificationWorkflow

__all__ = [
    "VerificationWorkflow",
    "haversine_distance",
    "within_geofence",
    "EARTH_RADIUS_METERS",
    "GEOFENCE_RADIUS_METERS",
]
