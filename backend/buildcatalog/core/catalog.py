"""
Faceted catalog query engine.

Listing items (laptops, monitors, parts...) are stored as JSON arrays inside
saved builds, so the same item shows up in many builds. A query:

    flatten + dedupe -> facet options -> filters -> search -> sort -> page

Each catalog is a CatalogSpec (a table of Facets) rather than its own code path.
Everything here is pure: no storage, no logging side effects beyond DEBUG.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from buildcatalog.core.parsing import parse_price

logger = logging.getLogger(__name__)

Item = Dict[str, Any]
NumericParser = Callable[[Any], Optional[int]]


@dataclass(frozen=True)
class Facet:
    """
    One filterable dimension of a catalog.

    - categorical facets (parser is None) filter by case-insensitive substring,
      or by exact value when exact=True
    - numeric facets (parser set) filter by a lower bound named `bound`
    """
    name: str
    field: str
    option_key: str
    parser: Optional[NumericParser] = None
    bound: Optional[str] = None
    exact: bool = False
    aliases: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def numeric(self) -> bool:
        return self.parser is not None


@dataclass(frozen=True)
class CatalogSpec:
    name: str
    items_field: str
    facets: Tuple[Facet, ...]
    search_fields: Tuple[str, ...] = ("name",)
    sort_keys: Tuple[str, ...] = ("price",)
    identity_field: str = "name"
    page_size: int = 12
    require_positive_price: bool = False

    def facet(self, name: str) -> Optional[Facet]:
        for f in self.facets:
            if f.name == name:
                return f
        return None


@dataclass
class CatalogCriteria:
    selections: Dict[str, List[str]] = field(default_factory=dict)
    minimums: Dict[str, float] = field(default_factory=dict)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search_query: Optional[str] = None
    sort_by: str = "price"
    sort_order: str = "asc"
    page: int = 1


@dataclass
class ResultPage:
    items: List[Item]
    has_more: bool
    total_results: int
    filter_options: Dict[str, list]


def _text(item: Mapping[str, Any], key: str) -> str:
    value = item.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def flatten_unique(
    containers: Iterable[Mapping[str, Any]],
    items_field: str,
    identity_field: str = "name",
) -> List[Item]:
    """
    Collect embedded items across containers, keeping the first item per identity key.
    Later duplicates are dropped as-is (no field merging).
    """
    seen: Dict[str, Item] = {}
    for container in containers:
        if not isinstance(container, Mapping):
            continue
        embedded = container.get(items_field)
        if not isinstance(embedded, list):
            continue
        for raw in embedded:
            if not isinstance(raw, Mapping):
                continue
            key = _text(raw, identity_field)
            if not key or key in seen:
                continue
            item = dict(raw)
            item["specs"] = raw.get("specs") or {}
            seen[key] = item
    return list(seen.values())


def facet_options(items: List[Item], facets: Iterable[Facet]) -> Dict[str, list]:
    """Distinct values per facet over the given (unfiltered) items."""
    options: Dict[str, list] = {}
    for f in facets:
        if f.numeric:
            parsed = {f.parser(item.get(f.field)) for item in items}
            parsed.discard(None)
            options[f.option_key] = sorted(parsed)
        else:
            values = {_text(item, f.field) for item in items}
            values.discard("")
            options[f.option_key] = sorted(values)
    return options


def _matches_selection(item: Item, f: Facet, selected: List[str]) -> bool:
    value = _text(item, f.field)
    if f.exact:
        accepted = set()
        for s in selected:
            accepted.update(f.aliases.get(s, (s,)))
        return value in accepted
    low = value.lower()
    return any(s.lower() in low for s in selected)


def _meets_minimum(item: Item, f: Facet, minimum: float) -> bool:
    parsed = f.parser(item.get(f.field))
    if parsed is None:
        return False
    return parsed >= minimum


def apply_filters(items: List[Item], spec: CatalogSpec, criteria: CatalogCriteria) -> List[Item]:
    result = items

    if spec.require_positive_price:
        result = [i for i in result if parse_price(i.get("price")) > 0]

    for f in spec.facets:
        if f.numeric:
            continue
        selected = [s for s in (criteria.selections.get(f.name) or []) if s]
        if selected:
            result = [i for i in result if _matches_selection(i, f, selected)]

    for f in spec.facets:
        if not f.numeric or not f.bound:
            continue
        minimum = criteria.minimums.get(f.bound)
        if minimum is not None:
            result = [i for i in result if _meets_minimum(i, f, minimum)]

    if criteria.min_price is not None:
        result = [i for i in result if parse_price(i.get("price")) >= criteria.min_price]
    if criteria.max_price is not None:
        result = [i for i in result if parse_price(i.get("price")) <= criteria.max_price]

    if criteria.search_query:
        needle = criteria.search_query.lower()
        fields = spec.search_fields or (spec.identity_field,)
        result = [
            i for i in result
            if any(needle in _text(i, k).lower() for k in fields)
        ]

    return result


def _sort_key(spec: CatalogSpec, sort_by: str) -> Callable[[Item], Any]:
    if sort_by == "price":
        return lambda i: parse_price(i.get("price"))

    f = spec.facet(sort_by)
    if f is not None and f.numeric:
        return lambda i: f.parser(i.get(f.field)) or 0
    # text keys compare case-insensitively ("asus" before "Dell")
    if f is not None:
        return lambda i: _text(i, f.field).casefold()

    # sortable text field that is not a facet (e.g. "name")
    return lambda i: _text(i, sort_by).casefold()


def sort_items(items: List[Item], spec: CatalogSpec, sort_by: str, sort_order: str) -> List[Item]:
    if sort_by not in spec.sort_keys:
        sort_by = "price"
    # sorted() stays stable with reverse=True, so ties keep input order either way
    return sorted(items, key=_sort_key(spec, sort_by), reverse=(sort_order == "desc"))


def query_catalog(
    containers: Iterable[Mapping[str, Any]],
    criteria: CatalogCriteria,
    spec: CatalogSpec,
) -> ResultPage:
    """
    Runs one catalog query over raw container records.
    Malformed items degrade to "absent" instead of raising.
    """
    items = flatten_unique(containers, spec.items_field, spec.identity_field)
    return query_items(items, criteria, spec)


def query_items(items: List[Item], criteria: CatalogCriteria, spec: CatalogSpec) -> ResultPage:
    """Same as query_catalog, for items already flattened and deduplicated."""
    options = facet_options(items, spec.facets)

    filtered = apply_filters(items, spec, criteria)
    ordered = sort_items(filtered, spec, criteria.sort_by, criteria.sort_order)

    page = max(1, int(criteria.page or 1))
    total = len(ordered)
    start = (page - 1) * spec.page_size
    page_items = ordered[start:start + spec.page_size]

    logger.debug(
        "catalog=%s unique=%d filtered=%d page=%d returned=%d",
        spec.name, len(items), total, page, len(page_items),
    )

    return ResultPage(
        items=page_items,
        has_more=total > page * spec.page_size,
        total_results=total,
        filter_options=options,
    )
