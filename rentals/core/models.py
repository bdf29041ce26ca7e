from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Union


PRICE_LOW_MAX = 500.0
PRICE_HIGH_MIN = 1000.0
PAGE_SIZE = 10
PAGE_WINDOW = 7
NEARBY_LIMIT = 4
NEARBY_CLOSE_KM = 1.2
EARTH_RADIUS_KM = 6371.0

AMENITIES = (
    "Wi-Fi",
    "Parking",
    "AirCon",
    "Pool",
    "Gym",
    "Security",
    "Washing machine",
    "Hot water",
)
PROPERTY_TYPES = ("Studio", "Apartment", "Condo", "Terrace", "Bungalow", "Room")
FURNISHED_STATES = ("full", "half", "none")
PRICE_BUCKETS = ("all", "low", "mid", "high")

PriceBucket = Literal["all", "low", "mid", "high"]
Furnished = Literal["full", "half", "none"]
KitchenChoice = Literal["any", "yes", "no"]


@dataclass(slots=True)
class Listing:
    id: str
    title: str
    area: str
    price: float
    beds: int
    address: str | None = None
    bathrooms: int | None = None
    kitchen: bool | None = None
    size_sqm: float | None = None
    property_type: str | None = None
    furnished: Furnished | None = None
    available_from: date | None = None
    amenities: tuple[str, ...] = ()
    lat: float | None = None
    lon: float | None = None
    views_count: int = 0


@dataclass(slots=True, frozen=True)
class SimpleCriteria:
    query: str = ""
    price_bucket: PriceBucket = "all"


@dataclass(slots=True, frozen=True)
class AdvancedCriteria:
    title: str | None = None
    address: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    beds: int | None = None
    bathrooms: int | None = None
    kitchen: KitchenChoice = "any"
    min_size: float | None = None
    property_type: str | None = None
    furnished: Furnished | None = None
    available_from: date | None = None
    amenities: tuple[str, ...] = ()


FilterCriteria = Union[SimpleCriteria, AdvancedCriteria]


@dataclass(slots=True, frozen=True)
class GeoPosition:
    lat: float
    lon: float


@dataclass(slots=True)
class RankedListing:
    listing: Listing
    distance_km: float | None = None


@dataclass(slots=True)
class ResultPage:
    items: list[RankedListing]
    page: int
    page_size: int
    total_count: int
    total_pages: int
    page_numbers: list[int] = field(default_factory=list)


@dataclass(slots=True)
class MarketSummary:
    total_properties: int
    total_views: int
    avg_price: float | None
    median_price: float | None
    top_areas: list[str]
