from __future__ import annotations

from typing import Any

from rentals.core.models import Listing
from rentals.core.normalize import row_to_listing
from rentals.core.supabase_repo import SupabaseRepo
from rentals.sources.base import ListingSource


class SupabaseSource(ListingSource):
    source_name = "supabase"

    def __init__(self, repo: SupabaseRepo | None = None, limit: int | None = None) -> None:
        self.repo = repo or SupabaseRepo()
        self.limit = limit

    def fetch(self) -> list[dict[str, Any]]:
        return self.repo.get_active_properties(limit=self.limit)

    def normalize(self, raw_item: dict[str, Any]) -> Listing | None:
        return row_to_listing(raw_item)
