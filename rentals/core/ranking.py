from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Sequence, TypeVar

from rentals.core.filters import filter_listings
from rentals.core.geo import distance_to
from rentals.core.models import (
    NEARBY_LIMIT,
    PAGE_SIZE,
    PAGE_WINDOW,
    FilterCriteria,
    GeoPosition,
    Listing,
    RankedListing,
    ResultPage,
)


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def rank_listings(listings: Iterable[Listing], position: GeoPosition | None = None) -> list[RankedListing]:
    """
    Order listings by distance to `position`, or by price when there is none.

    Both orders rely on `sorted` being stable so that equal keys keep their
    input order and pages stay reproducible across calls.
    """
    if position is None:
        ranked = [RankedListing(listing=listing) for listing in listings]
        return sorted(ranked, key=lambda item: item.listing.price)

    ranked = [RankedListing(listing=listing, distance_km=distance_to(position, listing)) for listing in listings]
    # Unknown distances sort after every known one.
    return sorted(
        ranked,
        key=lambda item: (item.distance_km is None, item.distance_km if item.distance_km is not None else 0.0),
    )


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    if count <= 0 or page_size <= 0:
        return 0
    return math.ceil(count / page_size)


def paginate(items: Sequence[T], page: int, page_size: int = PAGE_SIZE) -> list[T]:
    if page < 1 or page_size <= 0:
        return []
    start = (page - 1) * page_size
    return list(items[start : start + page_size])


def page_window(total: int, current_page: int, width: int = PAGE_WINDOW) -> list[int]:
    """
    Contiguous page numbers around `current_page` for a pagination control.

    Starts as current ±3; when that is short of `width` the window grows
    towards the end in the first half of the range and towards the start in
    the second half.
    """
    half = width // 2
    start = max(1, current_page - half)
    end = min(total, current_page + half)

    if end - start + 1 < width:
        if current_page < total / 2:
            end = min(total, start + width - 1)
        else:
            start = max(1, end - width + 1)

    start = max(1, start)
    end = min(total, end)
    return list(range(start, end + 1))


def resolve_jump_page(raw: Any, total: int) -> int | None:
    if isinstance(raw, bool):
        return None
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if 1 <= page <= total:
        return page
    return None


def nearby(ranked: Sequence[RankedListing], limit: int = NEARBY_LIMIT) -> list[RankedListing]:
    return list(ranked[: max(0, limit)])


def search(
    listings: Iterable[Listing],
    criteria: FilterCriteria,
    position: GeoPosition | None = None,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> ResultPage:
    listings = list(listings)
    ranked = rank_listings(filter_listings(listings, criteria), position)
    LOGGER.debug("Search input=%s matched=%s page=%s geo=%s", len(listings), len(ranked), page, position is not None)
    return build_page(ranked, page, page_size)


def build_page(ranked: Sequence[RankedListing], page: int = 1, page_size: int = PAGE_SIZE) -> ResultPage:
    pages = total_pages(len(ranked), page_size)
    return ResultPage(
        items=paginate(ranked, page, page_size),
        page=page,
        page_size=page_size,
        total_count=len(ranked),
        total_pages=pages,
        page_numbers=page_window(pages, page),
    )
