import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from buildcatalog.api.routes_catalog import store_unavailable
from buildcatalog.core.ads import active_banners, pick_banner
from buildcatalog.core.store import JsonStore, StoreError, get_store
from buildcatalog.schemas.ads import ActiveBannersResponse, BannerAd, BannerPickResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/banners", tags=["banners"])


def _load_ads(store: JsonStore) -> List[dict]:
    try:
        return store.banner_ads()
    except StoreError as e:
        raise store_unavailable(e)


def _to_schema(ad: dict) -> Optional[BannerAd]:
    try:
        return BannerAd.model_validate(ad)
    except ValidationError as e:
        logger.warning("Skipping malformed banner id=%s: %s", ad.get("id"), e)
        return None


@router.get("/active", response_model=ActiveBannersResponse)
def active(store: JsonStore = Depends(get_store)):
    """All currently active banners, highest priority first."""
    now = datetime.now(timezone.utc)
    banners = [_to_schema(ad) for ad in active_banners(_load_ads(store), now)]
    return ActiveBannersResponse(banners=[b for b in banners if b is not None])


@router.get("/{location_key}", response_model=BannerPickResponse)
def pick(location_key: str, store: JsonStore = Depends(get_store)):
    """
    One banner for a page slot, chosen at random weighted by priority.
    Returns banner=null when nothing is scheduled for the slot.
    """
    now = datetime.now(timezone.utc)
    candidates = [ad for ad in _load_ads(store) if _to_schema(ad) is not None]
    chosen = pick_banner(candidates, location_key, now)
    banner = BannerAd.model_validate(chosen) if chosen is not None else None
    return BannerPickResponse(locationKey=location_key, banner=banner)
