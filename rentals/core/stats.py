from __future__ import annotations

from collections import Counter
from statistics import median
from typing import Iterable

from rentals.core.models import Listing, MarketSummary


UNKNOWN_AREA = "Unknown"


def area_view_popularity(listings: Iterable[Listing]) -> list[tuple[str, int]]:
    totals: dict[str, list[int]] = {}
    for listing in listings:
        area = listing.area or UNKNOWN_AREA
        bucket = totals.setdefault(area, [0, 0])
        bucket[0] += listing.views_count or 0
        bucket[1] += 1
    averages = [(area, round(total / count)) for area, (total, count) in totals.items()]
    return sorted(averages, key=lambda item: item[1], reverse=True)


def summarize_market(listings: Iterable[Listing], top_n: int = 3) -> MarketSummary:
    listings = list(listings)
    prices = [listing.price for listing in listings]
    area_counts = Counter(listing.area or UNKNOWN_AREA for listing in listings)
    # Counter.most_common keeps first-seen order for equal counts.
    top_areas = [area for area, _ in area_counts.most_common(top_n)] if top_n > 0 else []

    return MarketSummary(
        total_properties=len(listings),
        total_views=sum(listing.views_count or 0 for listing in listings),
        avg_price=round(sum(prices) / len(prices), 2) if prices else None,
        median_price=float(median(prices)) if prices else None,
        top_areas=top_areas,
    )
