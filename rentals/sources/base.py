from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from rentals.core.models import Listing


LOGGER = logging.getLogger(__name__)


class ListingSource(ABC):
    source_name: str

    @abstractmethod
    def fetch(self) -> list[dict[str, Any]]:
        """Fetch raw property rows."""

    @abstractmethod
    def normalize(self, raw_item: dict[str, Any]) -> Listing | None:
        """Normalize a raw row into a Listing."""

    def load(self) -> list[Listing]:
        raw_items = self.fetch()
        listings: list[Listing] = []
        for item in raw_items:
            listing = self.normalize(item)
            if listing is not None:
                listings.append(listing)
        dropped = len(raw_items) - len(listings)
        if dropped:
            LOGGER.warning("Source=%s dropped %s unusable rows", self.source_name, dropped)
        LOGGER.info("Source=%s fetched=%s normalized=%s", self.source_name, len(raw_items), len(listings))
        return listings
