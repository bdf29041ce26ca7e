from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from rentals.core.models import GeoPosition
from rentals.core.normalize import parse_optional_float


LOGGER = logging.getLogger(__name__)

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "rentals-search/0.1"

ADDRESS_DETECTED = "Address detected"
UNKNOWN_LOCATION = "Unknown location"
ADDRESS_UNAVAILABLE = "Nearby (Address unavailable)"


def parse_position(lat: Any, lon: Any) -> GeoPosition | None:
    parsed_lat = parse_optional_float(lat)
    parsed_lon = parse_optional_float(lon)
    if parsed_lat is None or parsed_lon is None:
        return None
    if not (-90 <= parsed_lat <= 90) or not (-180 <= parsed_lon <= 180):
        return None
    return GeoPosition(lat=parsed_lat, lon=parsed_lon)


def reverse_geocode(
    position: GeoPosition,
    client: httpx.Client | None = None,
    timeout_seconds: float = 10.0,
) -> str:
    """
    Human-readable label for `position`, never raising on lookup failures.
    """
    params = {"lat": position.lat, "lon": position.lon, "format": "jsonv2"}
    headers = {"User-Agent": os.environ.get("GEOCODER_USER_AGENT", DEFAULT_USER_AGENT)}
    url = os.environ.get("NOMINATIM_REVERSE_URL", NOMINATIM_REVERSE_URL)
    try:
        if client is not None:
            response = client.get(url, params=params, headers=headers)
        else:
            with httpx.Client(timeout=timeout_seconds) as owned_client:
                response = owned_client.get(url, params=params, headers=headers)
    except httpx.HTTPError as exc:
        LOGGER.warning("Reverse geocode failed lat=%s lon=%s error=%s", position.lat, position.lon, exc)
        return ADDRESS_UNAVAILABLE

    if response.status_code >= 400:
        return UNKNOWN_LOCATION
    try:
        payload = response.json()
    except ValueError:
        return ADDRESS_UNAVAILABLE
    display_name = payload.get("display_name") if isinstance(payload, dict) else None
    return display_name or ADDRESS_DETECTED
