from __future__ import annotations

import os
from typing import Any

from supabase import Client, create_client


PROPERTY_COLUMNS = (
    "id, title, price, address, area, category, beds, bathrooms, size_sqm, kitchen, furnished, "
    "available_from, amenities, latitude, longitude, views_count, status, created_at"
)


class SupabaseRepo:
    def __init__(self, url: str | None = None, key: str | None = None) -> None:
        supabase_url = url or os.environ.get("SUPABASE_URL")
        supabase_key = key or os.environ.get("SUPABASE_KEY") or os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY (or SUPABASE_SERVICE_ROLE_KEY) are required.")
        self.client: Client = create_client(supabase_url, supabase_key)

    def get_active_properties(self, limit: int | None = None) -> list[dict[str, Any]]:
        query = (
            self.client.table("properties")
            .select(PROPERTY_COLUMNS)
            .eq("status", "active")
            .order("created_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        return query.execute().data or []
