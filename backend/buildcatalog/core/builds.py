from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from buildcatalog.core.parsing import parse_datetime, parse_price

BUILDS_PER_PAGE = 9
FEATURED_LIMIT = 6

# builds without a readable createdAt sort as the oldest
_NO_DATE = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class BuildPage:
    builds: List[Dict[str, Any]]
    has_more: bool
    total_count: int
    current_page: int
    total_pages: int


def _created_at(build: Mapping[str, Any]) -> datetime:
    return parse_datetime(build.get("createdAt")) or _NO_DATE


def _newest_first(builds: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    rows = [dict(b) for b in builds if isinstance(b, Mapping)]
    rows.sort(key=_created_at, reverse=True)
    return rows


def list_builds(
    builds: Sequence[Mapping[str, Any]],
    category: Optional[str] = None,
    sort_by_price: Optional[str] = None,
    page: int = 1,
) -> BuildPage:
    """
    Saved builds, newest first, optionally filtered by category and ordered by totalCost.
    Newest-first is kept as the tie-break when ordering by price.
    """
    rows = _newest_first(builds)

    if category and category != "All":
        rows = [b for b in rows if b.get("category") == category]

    # second stable pass on top of the newest-first order
    if sort_by_price in ("asc", "desc"):
        rows.sort(key=lambda b: parse_price(b.get("totalCost")), reverse=(sort_by_price == "desc"))

    page = max(1, int(page or 1))
    total = len(rows)
    start = (page - 1) * BUILDS_PER_PAGE

    return BuildPage(
        builds=rows[start:start + BUILDS_PER_PAGE],
        has_more=total > page * BUILDS_PER_PAGE,
        total_count=total,
        current_page=page,
        total_pages=math.ceil(total / BUILDS_PER_PAGE),
    )


def featured_builds(builds: Sequence[Mapping[str, Any]], limit: int = FEATURED_LIMIT) -> List[Dict[str, Any]]:
    """Builds flagged isFeatured, newest first, at most `limit`."""
    return [b for b in _newest_first(builds) if b.get("isFeatured") is True][:limit]


def find_build(builds: Sequence[Mapping[str, Any]], build_id: int) -> Optional[Dict[str, Any]]:
    for b in builds:
        if isinstance(b, Mapping) and not isinstance(b.get("id"), bool) and b.get("id") == build_id:
            return dict(b)
    return None
