from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping
from urllib.parse import quote

from buildcatalog.core.catalog import CatalogSpec, Facet
from buildcatalog.core.parsing import parse_leading_int, parse_storage_gb

BRAND = Facet(name="brand", field="brand", option_key="brands")
PROCESSOR = Facet(name="processor", field="processor", option_key="processors")
RAM = Facet(name="ram", field="ram", option_key="ramOptions", parser=parse_leading_int, bound="minRam")
STORAGE = Facet(
    name="storage", field="storage", option_key="storageOptions",
    parser=parse_storage_gb, bound="minStorage",
)

LAPTOPS = CatalogSpec(
    name="laptops",
    items_field="laptops",
    facets=(BRAND, PROCESSOR, RAM, STORAGE),
    search_fields=("name", "brand", "processor"),
    sort_keys=("price", "brand", "ram", "storage"),
)

MINI_PCS = CatalogSpec(
    name="miniPcs",
    items_field="miniPcs",
    facets=(BRAND, PROCESSOR, RAM, STORAGE),
    search_fields=("name", "brand", "processor"),
    sort_keys=("price", "brand", "ram", "storage"),
)

MONITORS = CatalogSpec(
    name="monitors",
    items_field="monitors",
    facets=(
        BRAND,
        Facet(name="resolution", field="resolution", option_key="resolutions"),
        Facet(name="panelType", field="panelType", option_key="panelTypes"),
        Facet(name="size", field="size", option_key="sizeOptions", parser=parse_leading_int, bound="minSize"),
        Facet(
            name="refreshRate", field="refreshRate", option_key="refreshRateOptions",
            parser=parse_leading_int, bound="minRefreshRate",
        ),
    ),
    search_fields=("name", "brand", "resolution"),
    sort_keys=("price", "brand", "size", "refreshRate"),
)

HEADSETS = CatalogSpec(
    name="headsets",
    items_field="headsets",
    facets=(
        BRAND,
        Facet(name="type", field="type", option_key="types"),
        Facet(name="connectivity", field="connectivity", option_key="connectivityOptions"),
    ),
    search_fields=("name", "brand", "type"),
    sort_keys=("price", "brand", "type"),
)

# Products: keyed by ASIN, exact category match, zero-priced placeholders never listed.
CATEGORY = Facet(
    name="category",
    field="category",
    option_key="categories",
    exact=True,
    aliases={"Storage": ("Storage", "SSD", "HDD")},
)

PRODUCTS = CatalogSpec(
    name="products",
    items_field="parts",
    facets=(CATEGORY,),
    search_fields=("name",),
    sort_keys=("price",),
    identity_field="asin",
    page_size=10,
    require_positive_price=True,
)


AMAZON_SEARCH_URL = "https://www.amazon.in/s?k={query}&tag={tag}"
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300x300.png?text={text}"


def _part_to_product(part: Mapping[str, Any], affiliate_id: str) -> Dict[str, Any]:
    name = str(part.get("name") or "")
    category = str(part.get("category") or "")
    return {
        "asin": part.get("asin"),
        "name": name,
        "price": part.get("price"),
        "category": category,
        "imageUrl": PLACEHOLDER_IMAGE_URL.format(text=quote(category, safe="")),
        "url": AMAZON_SEARCH_URL.format(query=quote(name, safe=""), tag=affiliate_id),
        "specs": part.get("specs") or {},
    }


def _catalog_to_product(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "asin": row.get("asin"),
        "name": row.get("name"),
        "price": row.get("price"),
        "category": row.get("category"),
        "imageUrl": row.get("imageUrl") or "",
        "url": row.get("url") or "",
        "specs": row.get("specs") or {},
    }


def product_containers(
    catalog_products: Iterable[Mapping[str, Any]],
    builds: Iterable[Mapping[str, Any]],
    affiliate_id: str = "",
) -> List[Dict[str, Any]]:
    """
    Curated catalog rows come first so they win the ASIN dedupe;
    parts embedded in builds only fill in ASINs the catalog does not have.
    """
    containers: List[Dict[str, Any]] = [
        {"parts": [_catalog_to_product(row) for row in catalog_products if isinstance(row, Mapping)]}
    ]
    for build in builds:
        parts = build.get("parts") if isinstance(build, Mapping) else None
        if not isinstance(parts, list):
            continue
        containers.append({
            "parts": [_part_to_product(p, affiliate_id) for p in parts if isinstance(p, Mapping)],
        })
    return containers
