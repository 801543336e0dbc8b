"""
Great-circle distance between coordinates given in degrees.
"""
import math

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def within_radius(
    origin_lat: float,
    origin_lon: float,
    lat: float | None,
    lon: float | None,
    max_distance_km: float,
) -> bool:
    # Jobs without both coordinates never match a radius filter.
    if lat is None or lon is None:
        return False
    return distance_km(origin_lat, origin_lon, lat, lon) <= max_distance_km
