from __future__ import annotations

from math import asin, cos, isfinite, radians, sin, sqrt

from rentals.core.models import EARTH_RADIUS_KM, NEARBY_CLOSE_KM, GeoPosition, Listing


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    if not all(isfinite(v) for v in (lat1, lon1, lat2, lon2)):
        return float("nan")
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    # Rounding can push `a` a hair past 1 for antipodal points.
    return 2 * EARTH_RADIUS_KM * asin(sqrt(min(1.0, a)))


def distance_to(position: GeoPosition, listing: Listing) -> float | None:
    """
    Distance from `position` to the listing, or None when it cannot be known.
    """
    if listing.lat is None or listing.lon is None:
        return None
    try:
        km = haversine_km(float(position.lat), float(position.lon), float(listing.lat), float(listing.lon))
    except (TypeError, ValueError):
        return None
    return km if isfinite(km) else None


def format_distance(km: float | None) -> str:
    if km is None or not isfinite(km):
        return ""
    if km < 1:
        return f"{km * 1000:.0f} m"
    return f"{km:.2f} km"


def is_close(km: float | None, threshold_km: float = NEARBY_CLOSE_KM) -> bool:
    return km is not None and isfinite(km) and km <= threshold_km
