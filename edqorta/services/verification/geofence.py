"""Great-circle distance and the on-site proximity check."""

import math

EARTH_RADIUS_METERS = 6_371_000.0
GEOFENCE_RADIUS_METERS = 0.5


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two WGS84 points on a spherical Earth."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def within_geofence(
    distance_meters: float,
    radius_meters: float = GEOFENCE_RADIUS_METERS,
) -> bool:
    """Boundary is inclusive. Sensor accuracy never widens the radius."""
    return distance_meters <= radius_meters
