from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rentals.core.models import Listing
from rentals.core.normalize import row_to_listing
from rentals.sources.base import ListingSource


class JsonFileSource(ListingSource):
    source_name = "json_file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def fetch(self) -> list[dict[str, Any]]:
        with open(self.path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
        # Accept a bare array or a {"properties": [...]} export.
        if isinstance(payload, dict):
            payload = payload.get("properties") or []
        if not isinstance(payload, list):
            raise ValueError(f"{self.path} does not contain a list of properties.")
        return [item for item in payload if isinstance(item, dict)]

    def normalize(self, raw_item: dict[str, Any]) -> Listing | None:
        return row_to_listing(raw_item)
