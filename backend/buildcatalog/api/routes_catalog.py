import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from buildcatalog.core.catalog import CatalogCriteria, CatalogSpec, ResultPage, query_catalog
from buildcatalog.core.catalogs import (
    HEADSETS,
    LAPTOPS,
    MINI_PCS,
    MONITORS,
    PRODUCTS,
    product_containers,
)
from buildcatalog.core.builds import featured_builds, find_build, list_builds
from buildcatalog.core.store import JsonStore, StoreError, get_store
from buildcatalog.schemas.catalog import (
    BuildsResponse,
    FeaturedBuildsResponse,
    HeadsetsResponse,
    LaptopsResponse,
    MiniPcsResponse,
    MonitorsResponse,
    ProductsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["catalog"])

SortOrder = Literal["asc", "desc"]
ProductCategory = Literal["CPU", "GPU", "Motherboard", "RAM", "Storage", "PSU", "Case", "Cooler", "All"]


def store_unavailable(e: StoreError) -> HTTPException:
    logger.error("Store read failed: %s (path=%s)", e.message, e.path)
    return HTTPException(
        status_code=503,
        detail={"error": "store_unavailable", "message": e.message},
    )


def _load_builds(store: JsonStore) -> list:
    try:
        return store.builds()
    except StoreError as e:
        raise store_unavailable(e)


def _run(store: JsonStore, spec: CatalogSpec, criteria: CatalogCriteria) -> ResultPage:
    return query_catalog(_load_builds(store), criteria, spec)


def _envelope(spec: CatalogSpec, result: ResultPage) -> dict:
    return {
        spec.name: result.items,
        "hasMore": result.has_more,
        "totalResults": result.total_results,
        "filterOptions": result.filter_options,
    }


def _computer_criteria(
    brand, processor, minRam, minStorage, minPrice, maxPrice, searchQuery, sortBy, sortOrder, page,
) -> CatalogCriteria:
    return CatalogCriteria(
        selections={"brand": brand or [], "processor": processor or []},
        minimums={k: v for k, v in (("minRam", minRam), ("minStorage", minStorage)) if v is not None},
        min_price=minPrice,
        max_price=maxPrice,
        search_query=searchQuery,
        sort_by=sortBy,
        sort_order=sortOrder,
        page=page,
    )


@router.get("/laptops", response_model=LaptopsResponse)
def laptops(
    brand: Optional[List[str]] = Query(None),
    processor: Optional[List[str]] = Query(None),
    minRam: Optional[float] = Query(None, description="GB"),
    minStorage: Optional[float] = Query(None, description="GB"),
    minPrice: Optional[float] = None,
    maxPrice: Optional[float] = None,
    searchQuery: Optional[str] = None,
    sortBy: Literal["price", "brand", "ram", "storage"] = "price",
    sortOrder: SortOrder = "asc",
    page: int = Query(1, ge=1),
    store: JsonStore = Depends(get_store),
):
    criteria = _computer_criteria(
        brand, processor, minRam, minStorage, minPrice, maxPrice, searchQuery, sortBy, sortOrder, page,
    )
    return _envelope(LAPTOPS, _run(store, LAPTOPS, criteria))


@router.get("/mini-pcs", response_model=MiniPcsResponse)
def mini_pcs(
    brand: Optional[List[str]] = Query(None),
    processor: Optional[List[str]] = Query(None),
    minRam: Optional[float] = Query(None, description="GB"),
    minStorage: Optional[float] = Query(None, description="GB"),
    minPrice: Optional[float] = None,
    maxPrice: Optional[float] = None,
    searchQuery: Optional[str] = None,
    sortBy: Literal["price", "brand", "ram", "storage"] = "price",
    sortOrder: SortOrder = "asc",
    page: int = Query(1, ge=1),
    store: JsonStore = Depends(get_store),
):
    criteria = _computer_criteria(
        brand, processor, minRam, minStorage, minPrice, maxPrice, searchQuery, sortBy, sortOrder, page,
    )
    return _envelope(MINI_PCS, _run(store, MINI_PCS, criteria))


@router.get("/monitors", response_model=MonitorsResponse)
def monitors(
    brand: Optional[List[str]] = Query(None),
    resolution: Optional[List[str]] = Query(None),
    panelType: Optional[List[str]] = Query(None),
    minSize: Optional[float] = Query(None, description="inches"),
    minRefreshRate: Optional[float] = Query(None, description="Hz"),
    minPrice: Optional[float] = None,
    maxPrice: Optional[float] = None,
    searchQuery: Optional[str] = None,
    sortBy: Literal["price", "brand", "size", "refreshRate"] = "price",
    sortOrder: SortOrder = "asc",
    page: int = Query(1, ge=1),
    store: JsonStore = Depends(get_store),
):
    criteria = CatalogCriteria(
        selections={
            "brand": brand or [],
            "resolution": resolution or [],
            "panelType": panelType or [],
        },
        minimums={
            k: v for k, v in (("minSize", minSize), ("minRefreshRate", minRefreshRate))
            if v is not None
        },
        min_price=minPrice,
        max_price=maxPrice,
        search_query=searchQuery,
        sort_by=sortBy,
        sort_order=sortOrder,
        page=page,
    )
    return _envelope(MONITORS, _run(store, MONITORS, criteria))


@router.get("/headsets", response_model=HeadsetsResponse)
def headsets(
    brand: Optional[List[str]] = Query(None),
    type: Optional[List[str]] = Query(None, description="Wired / Wireless"),
    connectivity: Optional[List[str]] = Query(None),
    minPrice: Optional[float] = None,
    maxPrice: Optional[float] = None,
    searchQuery: Optional[str] = None,
    sortBy: Literal["price", "brand", "type"] = "price",
    sortOrder: SortOrder = "asc",
    page: int = Query(1, ge=1),
    store: JsonStore = Depends(get_store),
):
    criteria = CatalogCriteria(
        selections={
            "brand": brand or [],
            "type": type or [],
            "connectivity": connectivity or [],
        },
        min_price=minPrice,
        max_price=maxPrice,
        search_query=searchQuery,
        sort_by=sortBy,
        sort_order=sortOrder,
        page=page,
    )
    return _envelope(HEADSETS, _run(store, HEADSETS, criteria))


@router.get("/products", response_model=ProductsResponse)
def products(
    category: ProductCategory = "All",
    minPrice: Optional[float] = None,
    maxPrice: Optional[float] = None,
    searchQuery: Optional[str] = None,
    page: int = Query(1, ge=1),
    store: JsonStore = Depends(get_store),
):
    """
    Curated catalog products merged with parts from saved builds (ASIN dedupe),
    cheapest first. Zero-priced entries are never listed.
    """
    try:
        catalog_rows = store.catalog_products()
        builds = store.builds()
        affiliate_id = store.affiliate_id()
    except StoreError as e:
        raise store_unavailable(e)

    criteria = CatalogCriteria(
        selections={"category": [] if category == "All" else [category]},
        min_price=minPrice,
        max_price=maxPrice,
        search_query=searchQuery,
        page=page,
    )
    containers = product_containers(catalog_rows, builds, affiliate_id)
    return _envelope(PRODUCTS, query_catalog(containers, criteria, PRODUCTS))


@router.get("/builds", response_model=BuildsResponse)
def builds(
    category: Optional[str] = None,
    sortByPrice: Optional[SortOrder] = None,
    page: int = Query(1, ge=1),
    store: JsonStore = Depends(get_store),
):
    result = list_builds(_load_builds(store), category=category, sort_by_price=sortByPrice, page=page)
    return {
        "builds": result.builds,
        "hasMore": result.has_more,
        "totalCount": result.total_count,
        "currentPage": result.current_page,
        "totalPages": result.total_pages,
    }


@router.get("/builds/featured", response_model=FeaturedBuildsResponse)
def featured(store: JsonStore = Depends(get_store)):
    """Up to six featured builds for the home page, newest first."""
    return {"builds": featured_builds(_load_builds(store))}


@router.get("/builds/{build_id}", response_model=Dict[str, Any])
def build_detail(build_id: int, store: JsonStore = Depends(get_store)):
    build = find_build(_load_builds(store), build_id)
    if build is None:
        raise HTTPException(
            status_code=404,
            detail={"error": "build_not_found", "message": f"Build {build_id} not found"},
        )
    return build
