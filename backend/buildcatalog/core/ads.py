from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PRIORITY = 1


def weighted_choice(
    candidates: Sequence[T],
    weight: Callable[[T], float],
    rng: Optional[random.Random] = None,
) -> Optional[T]:
    """
    Pick one candidate with probability weight_i / sum(weights).

    Draws r in [0, total), then walks the candidates subtracting weights;
    the first one that brings r to <= 0 wins. If float drift lets the loop
    finish without a winner, the last candidate considered is returned.
    """
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    rng = rng or random
    total = sum(weight(c) for c in candidates)
    remaining = rng.random() * total

    chosen = candidates[-1]
    for c in candidates:
        remaining -= weight(c)
        if remaining <= 0:
            chosen = c
            break
    return chosen


def is_active(ad: Mapping[str, Any], now: datetime) -> bool:
    """
    Active = isActive flag set, and now inside [startDate, endDate]
    where either bound may be missing (open-ended).
    """
    if not ad.get("isActive"):
        return False
    start = ad.get("startDate")
    end = ad.get("endDate")
    if start is not None and start > now:
        return False
    if end is not None and end < now:
        return False
    return True


def active_banners(ads: Sequence[Mapping[str, Any]], now: datetime) -> list:
    """Active ads, highest priority first (ties keep store order)."""
    active = [ad for ad in ads if is_active(ad, now)]
    return sorted(active, key=banner_priority, reverse=True)


def banner_priority(ad: Mapping[str, Any]) -> int:
    """
    Selection weight of an ad, read the same way BannerAd.priority is:
    missing => 1, numeric strings like "5" => 5. Unreadable or negative => 0.
    """
    value = ad.get("priority")
    if value is None:
        return DEFAULT_PRIORITY
    try:
        weight = int(value.strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, weight)


def pick_banner(
    ads: Sequence[Mapping[str, Any]],
    location_key: str,
    now: datetime,
    rng: Optional[random.Random] = None,
) -> Optional[Mapping[str, Any]]:
    """
    One ad for a page location, weighted by priority.
    Runs fresh per request: there is no stickiness between calls.
    """
    candidates = [ad for ad in active_banners(ads, now) if ad.get("locationKey") == location_key]
    chosen = weighted_choice(candidates, banner_priority, rng)
    if chosen is None:
        logger.debug("no active banner for location=%s", location_key)
    else:
        logger.debug("banner id=%s picked for location=%s from %d", chosen.get("id"), location_key, len(candidates))
    return chosen
