from __future__ import annotations

import math
from typing import Iterable

from rentals.core.models import (
    PRICE_HIGH_MIN,
    PRICE_LOW_MAX,
    AdvancedCriteria,
    FilterCriteria,
    Listing,
    SimpleCriteria,
)


def filter_listings(listings: Iterable[Listing], criteria: FilterCriteria) -> list[Listing]:
    return [listing for listing in listings if matches(listing, criteria)]


def matches(listing: Listing, criteria: FilterCriteria) -> bool:
    if isinstance(criteria, AdvancedCriteria):
        return matches_advanced(listing, criteria)
    return matches_simple(listing, criteria)


def matches_simple(listing: Listing, criteria: SimpleCriteria) -> bool:
    query = (criteria.query or "").lower()
    if query:
        haystacks = (listing.title, listing.area, listing.address)
        if not any(text and query in text.lower() for text in haystacks):
            return False
    return in_price_bucket(listing.price, criteria.price_bucket)


def in_price_bucket(price: float, bucket: str) -> bool:
    # 500 and 1000 both belong to "mid".
    if bucket == "low":
        return price < PRICE_LOW_MAX
    if bucket == "mid":
        return PRICE_LOW_MAX <= price <= PRICE_HIGH_MIN
    if bucket == "high":
        return price > PRICE_HIGH_MIN
    return True


def matches_advanced(listing: Listing, criteria: AdvancedCriteria) -> bool:
    if criteria.title and criteria.title.lower() not in (listing.title or "").lower():
        return False
    if criteria.address:
        location = listing.address or listing.area or ""
        if criteria.address.lower() not in location.lower():
            return False

    if _is_set(criteria.min_price) and listing.price < criteria.min_price:
        return False
    if _is_set(criteria.max_price) and listing.price > criteria.max_price:
        return False

    if criteria.beds is not None and listing.beds != criteria.beds:
        return False
    if criteria.bathrooms is not None and listing.bathrooms != criteria.bathrooms:
        return False

    if criteria.kitchen in {"yes", "no"}:
        if bool(listing.kitchen) != (criteria.kitchen == "yes"):
            return False

    # Unknown size counts as zero, so any positive minimum excludes it.
    if _is_set(criteria.min_size) and (listing.size_sqm or 0) < criteria.min_size:
        return False

    if criteria.property_type and listing.property_type != criteria.property_type:
        return False
    if criteria.furnished and listing.furnished != criteria.furnished:
        return False

    if criteria.available_from is not None and listing.available_from is not None:
        if listing.available_from < criteria.available_from:
            return False

    if criteria.amenities and not set(criteria.amenities).issubset(listing.amenities):
        return False

    return True


def _is_set(value: float | None) -> bool:
    return value is not None and not math.isnan(value)
