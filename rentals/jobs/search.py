from __future__ import annotations

import argparse
import json
import logging
import os
import time
from typing import Any, Callable, Sequence

from rentals.core.filters import filter_listings
from rentals.core.geo import format_distance, is_close
from rentals.core.geocode import parse_position, reverse_geocode
from rentals.core.models import (
    AMENITIES,
    FURNISHED_STATES,
    PAGE_SIZE,
    PRICE_BUCKETS,
    PROPERTY_TYPES,
    FilterCriteria,
    GeoPosition,
    Listing,
    ResultPage,
)
from rentals.core.normalize import build_advanced_criteria, build_simple_criteria
from rentals.core.ranking import build_page, nearby, rank_listings
from rentals.core.stats import summarize_market
from rentals.sources.base import ListingSource
from rentals.sources.json_file import JsonFileSource
from rentals.sources.supabase_table import SupabaseSource


LOGGER = logging.getLogger(__name__)


def run_search(
    source: ListingSource,
    criteria: FilterCriteria,
    position: GeoPosition | None = None,
    page: int = 1,
    page_size: int | None = None,
    with_address: bool = False,
) -> dict[str, Any]:
    resolved_page_size = page_size if page_size is not None else _env_int("LISTINGS_PAGE_SIZE", PAGE_SIZE)
    if resolved_page_size <= 0:
        resolved_page_size = PAGE_SIZE
    listings = _load_with_retry(source.load, source_name=source.source_name)

    ranked = rank_listings(filter_listings(listings, criteria), position)
    result = build_page(ranked, page, resolved_page_size)
    LOGGER.info(
        "Search completed source=%s listings=%s matched=%s page=%s/%s",
        source.source_name,
        len(listings),
        result.total_count,
        result.page,
        result.total_pages,
    )

    output = page_to_dict(result)
    # Without a position the sidebar shows the cheapest matches.
    output["nearby"] = [
        {
            "id": item.listing.id,
            "title": item.listing.title,
            "price": item.listing.price,
            "distance": format_distance(item.distance_km),
            "close": is_close(item.distance_km),
        }
        for item in nearby(ranked)
    ]
    if position is not None and with_address:
        output["location"] = reverse_geocode(position)
    output["market"] = _summary_to_dict(listings)
    return output


def page_to_dict(result: ResultPage) -> dict[str, Any]:
    return {
        "page": result.page,
        "page_size": result.page_size,
        "total_count": result.total_count,
        "total_pages": result.total_pages,
        "page_numbers": result.page_numbers,
        "items": [
            {
                "id": item.listing.id,
                "title": item.listing.title,
                "area": item.listing.area,
                "price": item.listing.price,
                "distance_km": round(item.distance_km, 3) if item.distance_km is not None else None,
                "distance": format_distance(item.distance_km),
            }
            for item in result.items
        ],
    }


def build_criteria(args: argparse.Namespace) -> FilterCriteria:
    if not args.advanced:
        return build_simple_criteria(args.query, args.price_bucket)
    return build_advanced_criteria(
        title=args.title,
        address=args.address,
        min_price=args.min_price,
        max_price=args.max_price,
        beds=args.beds,
        bathrooms=args.bathrooms,
        kitchen=args.kitchen,
        min_size=args.min_size,
        property_type=args.property_type,
        furnished=args.furnished,
        available_from=args.available_from,
        amenities=args.amenity,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Filter, rank and paginate rental listings.")
    parser.add_argument("--input", help="JSON file with property rows. Defaults to the Supabase properties table.")
    parser.add_argument("--query", default="", help="Simple search text (title, area, address).")
    parser.add_argument("--price-bucket", default="all", choices=PRICE_BUCKETS)
    parser.add_argument("--advanced", action="store_true", help="Use the advanced filters instead of simple search.")
    parser.add_argument("--title")
    parser.add_argument("--address")
    parser.add_argument("--min-price")
    parser.add_argument("--max-price")
    parser.add_argument("--beds")
    parser.add_argument("--bathrooms")
    parser.add_argument("--kitchen", default="any", choices=["any", "yes", "no"])
    parser.add_argument("--min-size")
    parser.add_argument("--property-type", choices=PROPERTY_TYPES)
    parser.add_argument("--furnished", choices=FURNISHED_STATES)
    parser.add_argument("--available-from", help="YYYY-MM-DD")
    parser.add_argument("--amenity", action="append", default=[], choices=AMENITIES, help="Required amenity; repeatable.")
    parser.add_argument("--lat")
    parser.add_argument("--lon")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=None)
    parser.add_argument("--reverse-geocode", action="store_true", help="Resolve the position to an address label.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = build_parser().parse_args(argv)

    source: ListingSource = JsonFileSource(args.input) if args.input else SupabaseSource()
    position = parse_position(args.lat, args.lon) if args.lat is not None or args.lon is not None else None
    if (args.lat is not None or args.lon is not None) and position is None:
        LOGGER.warning("Ignoring invalid position lat=%s lon=%s", args.lat, args.lon)

    output = run_search(
        source,
        build_criteria(args),
        position=position,
        page=args.page,
        page_size=args.page_size,
        with_address=args.reverse_geocode,
    )
    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


def _summary_to_dict(listings: list[Listing]) -> dict[str, Any]:
    summary = summarize_market(listings)
    return {
        "total_properties": summary.total_properties,
        "total_views": summary.total_views,
        "avg_price": summary.avg_price,
        "median_price": summary.median_price,
        "top_areas": summary.top_areas,
    }


def _load_with_retry(
    load_func: Callable[[], list[Listing]],
    source_name: str,
    max_attempts: int = 3,
) -> list[Listing]:
    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            return load_func()
        except (FileNotFoundError, ValueError):
            # Bad input is not retried.
            raise
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            if attempt >= max_attempts:
                break
            wait_seconds = attempt * 2
            LOGGER.warning(
                "Source retry source=%s attempt=%s/%s wait=%ss error=%s",
                source_name,
                attempt,
                max_attempts,
                wait_seconds,
                exc,
            )
            time.sleep(wait_seconds)
    if last_error:
        LOGGER.error("Source load failed source=%s error=%s", source_name, last_error)
        raise last_error
    return []


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except (TypeError, ValueError):
        return default


if __name__ == "__main__":
    raise SystemExit(main())
