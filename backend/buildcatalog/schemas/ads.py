from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import Any, Optional, List, Union

from buildcatalog.core.ads import DEFAULT_PRIORITY, banner_priority


class BannerAd(BaseModel):
    id: Union[int, str]
    imageUrl: Optional[str] = None
    destinationUrl: Optional[str] = None
    htmlContent: Optional[str] = None   # rendered as-is instead of the image when present
    locationKey: str
    priority: int = DEFAULT_PRIORITY
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None

    @field_validator("priority", mode="before")
    @classmethod
    def _selection_weight(cls, v: Any) -> int:
        # report exactly the weight the picker uses
        return banner_priority({"priority": v})


class ActiveBannersResponse(BaseModel):
    banners: List[BannerAd]


class BannerPickResponse(BaseModel):
    locationKey: str
    banner: Optional[BannerAd] = None
