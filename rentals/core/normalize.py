from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Iterable

from rentals.core.models import (
    FURNISHED_STATES,
    PRICE_BUCKETS,
    AdvancedCriteria,
    Listing,
    SimpleCriteria,
)


def row_to_listing(row: dict[str, Any]) -> Listing | None:
    """
    Map a `properties` table row onto a Listing.

    Rows without an id or a usable price are dropped; every other malformed
    field is normalized to None so the filters treat it as absent.
    """
    row_id = row.get("id")
    price = parse_optional_float(row.get("price"))
    if row_id is None or str(row_id).strip() == "" or price is None or price < 0:
        return None

    lat = parse_optional_float(_first_present(row, "latitude", "lat"))
    lon = parse_optional_float(_first_present(row, "longitude", "lon", "lng"))
    if lat is None or lon is None or not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
        lat, lon = None, None

    beds = parse_optional_int(row.get("beds"))
    size_sqm = parse_optional_float(_first_present(row, "size_sqm", "propertySize"))
    furnished = row.get("furnished")
    kitchen = row.get("kitchen")

    return Listing(
        id=str(row_id),
        title=_clean_text(row.get("title")) or "",
        area=_clean_text(row.get("area")) or "",
        address=_clean_text(row.get("address")),
        price=price,
        beds=beds if beds is not None and beds >= 0 else 0,
        bathrooms=_non_negative(parse_optional_int(_first_present(row, "bathrooms", "bathroom"))),
        kitchen=kitchen if isinstance(kitchen, bool) else None,
        size_sqm=size_sqm if size_sqm is not None and size_sqm >= 0 else None,
        property_type=_clean_text(_first_present(row, "category", "property_type", "propertyType")),
        furnished=furnished if furnished in FURNISHED_STATES else None,
        available_from=parse_date(_first_present(row, "available_from", "availableFrom")),
        amenities=normalize_amenities(row.get("amenities") or row.get("features")),
        lat=lat,
        lon=lon,
        views_count=_non_negative(parse_optional_int(row.get("views_count"))) or 0,
    )


def build_simple_criteria(query: str | None = None, price_bucket: str | None = None) -> SimpleCriteria:
    bucket = (price_bucket or "all").strip().lower()
    if bucket not in PRICE_BUCKETS:
        bucket = "all"
    return SimpleCriteria(query=(query or "").strip(), price_bucket=bucket)  # type: ignore[arg-type]


def build_advanced_criteria(
    title: str | None = None,
    address: str | None = None,
    min_price: Any = None,
    max_price: Any = None,
    beds: Any = None,
    bathrooms: Any = None,
    kitchen: str | None = None,
    min_size: Any = None,
    property_type: str | None = None,
    furnished: str | None = None,
    available_from: Any = None,
    amenities: Iterable[str] | None = None,
) -> AdvancedCriteria:
    """
    Build advanced criteria from raw search-form values.

    Blank strings, "any" selections and values that do not parse all become
    "not applied".
    """
    kitchen_choice = (kitchen or "any").strip().lower()
    if kitchen_choice not in {"any", "yes", "no"}:
        kitchen_choice = "any"

    furnished_choice = _select_value(furnished)
    if furnished_choice is not None:
        furnished_choice = furnished_choice.lower()
        if furnished_choice not in FURNISHED_STATES:
            furnished_choice = None

    return AdvancedCriteria(
        title=_clean_text(title),
        address=_clean_text(address),
        min_price=parse_optional_float(min_price),
        max_price=parse_optional_float(max_price),
        beds=parse_optional_int(beds),
        bathrooms=parse_optional_int(bathrooms),
        kitchen=kitchen_choice,  # type: ignore[arg-type]
        min_size=parse_optional_float(min_size),
        property_type=_select_value(property_type),
        furnished=furnished_choice,  # type: ignore[arg-type]
        available_from=parse_date(available_from),
        amenities=normalize_amenities(amenities),
    )


def parse_optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def parse_optional_int(value: Any) -> int | None:
    parsed = parse_optional_float(value)
    if parsed is None or not parsed.is_integer():
        return None
    return int(parsed)


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped:
        return None
    try:
        return date.fromisoformat(stripped)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(stripped.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def normalize_amenities(values: Any) -> tuple[str, ...]:
    if not values or isinstance(values, (str, bytes)):
        return ()
    seen: dict[str, None] = {}
    for value in values:
        if not isinstance(value, str):
            continue
        cleaned = value.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return tuple(seen)


def _first_present(row: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def _clean_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _select_value(value: Any) -> str | None:
    cleaned = _clean_text(value)
    if cleaned is None or cleaned.lower() == "any":
        return None
    return cleaned


def _non_negative(value: int | None) -> int | None:
    if value is None or value < 0:
        return None
    return value
