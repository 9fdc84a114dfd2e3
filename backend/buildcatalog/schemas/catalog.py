from pydantic import BaseModel
from typing import Any, Dict, List


# Items are passed through as stored (name, brand, price, specs, url, ...).
Listing = Dict[str, Any]


class ComputerFilterOptions(BaseModel):
    brands: List[str] = []
    processors: List[str] = []
    ramOptions: List[int] = []       # GB
    storageOptions: List[int] = []   # GB, TB already converted


class MonitorFilterOptions(BaseModel):
    brands: List[str] = []
    resolutions: List[str] = []
    panelTypes: List[str] = []
    sizeOptions: List[int] = []         # inches
    refreshRateOptions: List[int] = []  # Hz


class HeadsetFilterOptions(BaseModel):
    brands: List[str] = []
    types: List[str] = []
    connectivityOptions: List[str] = []


class ProductFilterOptions(BaseModel):
    categories: List[str] = []


class LaptopsResponse(BaseModel):
    laptops: List[Listing]
    hasMore: bool
    totalResults: int
    filterOptions: ComputerFilterOptions


class MiniPcsResponse(BaseModel):
    miniPcs: List[Listing]
    hasMore: bool
    totalResults: int
    filterOptions: ComputerFilterOptions


class MonitorsResponse(BaseModel):
    monitors: List[Listing]
    hasMore: bool
    totalResults: int
    filterOptions: MonitorFilterOptions


class HeadsetsResponse(BaseModel):
    headsets: List[Listing]
    hasMore: bool
    totalResults: int
    filterOptions: HeadsetFilterOptions


class ProductsResponse(BaseModel):
    products: List[Listing]
    hasMore: bool
    totalResults: int
    filterOptions: ProductFilterOptions


class BuildsResponse(BaseModel):
    builds: List[Dict[str, Any]]
    hasMore: bool
    totalCount: int
    currentPage: int
    totalPages: int


class FeaturedBuildsResponse(BaseModel):
    builds: List[Dict[str, Any]]
