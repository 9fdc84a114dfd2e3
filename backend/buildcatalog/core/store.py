"""
Read-only JSON store.

The site's database is exported to one JSON document:

    {
      "builds":         [ {id, name, category, totalCost, createdAt, parts, laptops, monitors, ...} ],
      "productCatalog": [ {asin, name, price, category, imageUrl, url, specs} ],
      "bannerAds":      [ {id, imageUrl, destinationUrl, htmlContent, locationKey,
                           priority, isActive, startDate, endDate} ],
      "adminConfig":    {amazonAffiliateId}
    }

The file is re-read on every call; nothing is cached between requests.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from buildcatalog.core.config import settings
from buildcatalog.core.parsing import parse_datetime

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the backing document cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


def _as_list(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


class JsonStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot read data file: {e}", path=str(self.path)) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"Data file is not valid JSON: {e}", path=str(self.path)) from e

        if not isinstance(data, dict):
            raise StoreError("Data file must contain a JSON object", path=str(self.path))
        return data

    def builds(self) -> List[Dict[str, Any]]:
        rows = _as_list(self._load(), "builds")
        logger.info("Loaded %d builds from %s", len(rows), self.path)
        return rows

    def catalog_products(self) -> List[Dict[str, Any]]:
        return _as_list(self._load(), "productCatalog")

    def banner_ads(self) -> List[Dict[str, Any]]:
        ads = []
        for row in _as_list(self._load(), "bannerAds"):
            ad = dict(row)
            ad["startDate"] = parse_datetime(row.get("startDate"))
            ad["endDate"] = parse_datetime(row.get("endDate"))
            ads.append(ad)
        return ads

    def affiliate_id(self) -> str:
        config = self._load().get("adminConfig")
        if not isinstance(config, dict):
            return ""
        return str(config.get("amazonAffiliateId") or "")


def get_store() -> JsonStore:
    """FastAPI dependency; tests override it with a fixture file."""
    return JsonStore(settings.DATA_PATH)
