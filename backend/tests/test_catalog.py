"""Unit tests for the catalog query engine (pure, no store)."""

from buildcatalog.core.catalog import (
    CatalogCriteria,
    apply_filters,
    facet_options,
    flatten_unique,
    query_catalog,
    sort_items,
)
from buildcatalog.core.catalogs import LAPTOPS


def _laptop(name, brand="Acer", processor="Intel Core i5", ram="8GB", storage="512GB", price=30000, **extra):
    item = {
        "name": name,
        "brand": brand,
        "processor": processor,
        "ram": ram,
        "storage": storage,
        "price": price,
    }
    item.update(extra)
    return item


def _names(items):
    return [i["name"] for i in items]


SCENARIO = [
    {"laptops": [{"name": "A", "brand": "Acer", "ram": "8GB", "price": 30000}]},
    {"laptops": [
        {"name": "A", "brand": "Acer", "ram": "8GB", "price": 30000},
        {"name": "B", "brand": "Dell", "ram": "16GB", "price": 50000},
    ]},
]


class TestScenario:
    """Two builds sharing laptop A."""

    def test_dedupe(self):
        result = query_catalog(SCENARIO, CatalogCriteria(), LAPTOPS)
        assert _names(result.items) == ["A", "B"]
        assert result.total_results == 2

    def test_min_ram(self):
        result = query_catalog(SCENARIO, CatalogCriteria(minimums={"minRam": 16}), LAPTOPS)
        assert _names(result.items) == ["B"]

    def test_price_desc(self):
        result = query_catalog(SCENARIO, CatalogCriteria(sort_order="desc"), LAPTOPS)
        assert _names(result.items) == ["B", "A"]


class TestFlattenUnique:
    """Flatten and dedupe across containers."""

    def test_first_occurrence_wins_without_merge(self):
        containers = [
            {"laptops": [_laptop("A", price=30000)]},
            {"laptops": [_laptop("A", price=99999, gpu="RTX 4090")]},
        ]
        items = flatten_unique(containers, "laptops")
        assert len(items) == 1
        assert items[0]["price"] == 30000
        assert "gpu" not in items[0]

    def test_item_in_many_containers_appears_once_at_first_position(self):
        containers = [
            {"laptops": [_laptop("X")]},
            {"laptops": [_laptop("Y"), _laptop("X")]},
            {"laptops": [_laptop("Z"), _laptop("X"), _laptop("Y")]},
        ]
        assert _names(flatten_unique(containers, "laptops")) == ["X", "Y", "Z"]

    def test_idempotent(self):
        containers = [
            {"laptops": [_laptop("X"), _laptop("Y")]},
            {"laptops": [_laptop("Y"), _laptop("Z")]},
        ]
        first = flatten_unique(containers, "laptops")
        second = flatten_unique(containers, "laptops")
        assert first == second
        assert flatten_unique([{"laptops": first}], "laptops") == first

    def test_malformed_input_is_skipped(self):
        containers = [
            "not-a-build",
            {"laptops": None},
            {"laptops": "oops"},
            {"monitors": [{"name": "M"}]},
            {"laptops": [42, {"brand": "NoName"}, {"name": ""}, _laptop("Ok")]},
        ]
        assert _names(flatten_unique(containers, "laptops")) == ["Ok"]

    def test_specs_default_to_empty_mapping(self):
        containers = [{"laptops": [_laptop("A"), _laptop("B", specs=None), _laptop("C", specs={"os": "Linux"})]}]
        items = flatten_unique(containers, "laptops")
        assert [i["specs"] for i in items] == [{}, {}, {"os": "Linux"}]

    def test_does_not_mutate_input(self):
        raw = _laptop("A")
        flatten_unique([{"laptops": [raw]}], "laptops")
        assert "specs" not in raw


class TestFacetOptions:
    """Facet options come from the unfiltered, deduplicated set."""

    def test_values(self):
        items = [
            _laptop("A", brand="Dell", ram="16GB", storage="1TB"),
            _laptop("B", brand="Acer", ram="8GB", storage="512GB"),
            _laptop("C", brand="Dell", ram="16 GB", storage="2TB"),
            _laptop("D", brand="Asus", ram="?", storage="n/a"),
        ]
        options = facet_options(items, LAPTOPS.facets)
        assert options["brands"] == ["Acer", "Asus", "Dell"]
        assert options["ramOptions"] == [8, 16]
        assert options["storageOptions"] == [512, 1024, 2048]
        assert options["processors"] == ["Intel Core i5"]

    def test_independent_of_filters(self):
        containers = [{"laptops": [
            _laptop("A", brand="Dell", ram="16GB"),
            _laptop("B", brand="Acer", ram="8GB"),
        ]}]
        unfiltered = query_catalog(containers, CatalogCriteria(), LAPTOPS)
        narrowed = query_catalog(
            containers,
            CatalogCriteria(selections={"brand": ["dell"]}, minimums={"minRam": 16}, search_query="A"),
            LAPTOPS,
        )
        assert narrowed.total_results == 1
        assert narrowed.filter_options == unfiltered.filter_options

    def test_categorical_values_are_exact(self):
        items = [_laptop("A", brand="Dell"), _laptop("B", brand="dell"), _laptop("C", brand="Dell Inc")]
        assert facet_options(items, LAPTOPS.facets)["brands"] == ["Dell", "Dell Inc", "dell"]


class TestFilters:
    """Filter predicates."""

    ITEMS = [
        _laptop("Swift 3", brand="Acer", processor="Intel Core i5-1235U", ram="8GB", storage="512GB", price=45000),
        _laptop("XPS 13", brand="Dell", processor="Intel Core i7-1360P", ram="16GB", storage="1TB", price=120000),
        _laptop("Zephyrus", brand="ASUS", processor="AMD Ryzen 9", ram="32GB", storage="2TB", price=180000),
        _laptop("Mystery", brand="Generic", processor="Unknown", ram="TBD", storage="eMMC", price=15000),
    ]

    def _filter(self, **kwargs):
        return _names(apply_filters(self.ITEMS, LAPTOPS, CatalogCriteria(**kwargs)))

    def test_no_criteria_keeps_everything(self):
        assert self._filter() == ["Swift 3", "XPS 13", "Zephyrus", "Mystery"]

    def test_brand_substring_case_insensitive(self):
        assert self._filter(selections={"brand": ["asus"]}) == ["Zephyrus"]

    def test_or_within_facet(self):
        assert self._filter(selections={"brand": ["acer", "DELL"]}) == ["Swift 3", "XPS 13"]

    def test_and_across_facets(self):
        assert self._filter(selections={"brand": ["acer", "dell"], "processor": ["i7"]}) == ["XPS 13"]

    def test_empty_selection_is_ignored(self):
        assert len(self._filter(selections={"brand": [], "processor": [""]})) == 4

    def test_min_ram_excludes_unparseable(self):
        assert self._filter(minimums={"minRam": 1}) == ["Swift 3", "XPS 13", "Zephyrus"]

    def test_min_storage_uses_tb_conversion(self):
        assert self._filter(minimums={"minStorage": 1000}) == ["XPS 13", "Zephyrus"]
        assert self._filter(minimums={"minStorage": 2048}) == ["Zephyrus"]

    def test_price_bounds(self):
        assert self._filter(min_price=45000, max_price=120000) == ["Swift 3", "XPS 13"]

    def test_search_matches_name_brand_or_processor(self):
        assert self._filter(search_query="xps") == ["XPS 13"]
        assert self._filter(search_query="generic") == ["Mystery"]
        assert self._filter(search_query="ryzen") == ["Zephyrus"]
        assert self._filter(search_query="nothing-like-this") == []

    def test_adding_filters_never_grows_results(self):
        steps = [
            {},
            {"selections": {"brand": ["a", "d"]}},
            {"selections": {"brand": ["a", "d"]}, "max_price": 150000},
            {"selections": {"brand": ["a", "d"]}, "max_price": 150000, "minimums": {"minRam": 16}},
            {"selections": {"brand": ["a", "d"]}, "max_price": 150000, "minimums": {"minRam": 16},
             "search_query": "13"},
        ]
        totals = [len(self._filter(**s)) for s in steps]
        assert totals == sorted(totals, reverse=True)
        assert totals[-1] == 1

    def test_positive_price_rule_is_per_catalog(self):
        items = [_laptop("Free", price=0), _laptop("Paid", price=10)]
        assert _names(apply_filters(items, LAPTOPS, CatalogCriteria())) == ["Free", "Paid"]


class TestSort:
    """Sorting."""

    def test_default_price_asc(self):
        items = [_laptop("B", price=50000), _laptop("A", price=30000), _laptop("C", price=40000)]
        assert _names(sort_items(items, LAPTOPS, "price", "asc")) == ["A", "C", "B"]

    def test_brand(self):
        items = [_laptop("1", brand="Lenovo"), _laptop("2", brand="Acer"), _laptop("3", brand="Dell")]
        assert _names(sort_items(items, LAPTOPS, "brand", "asc")) == ["2", "3", "1"]
        assert _names(sort_items(items, LAPTOPS, "brand", "desc")) == ["1", "3", "2"]

    def test_brand_ignores_case(self):
        items = [_laptop("dell", brand="Dell"), _laptop("asus", brand="asus"), _laptop("zotac", brand="ZOTAC")]
        assert _names(sort_items(items, LAPTOPS, "brand", "asc")) == ["asus", "dell", "zotac"]
        assert _names(sort_items(items, LAPTOPS, "brand", "desc")) == ["zotac", "dell", "asus"]

    def test_nan_price_sorts_as_zero(self):
        items = [_laptop("B", price=2), _laptop("nan", price=float("nan")), _laptop("A", price=1)]
        assert _names(sort_items(items, LAPTOPS, "price", "asc")) == ["nan", "A", "B"]
        assert _names(apply_filters(items, LAPTOPS, CatalogCriteria(min_price=1))) == ["B", "A"]

    def test_storage_normalized(self):
        items = [_laptop("1TB", storage="1TB"), _laptop("512", storage="512GB"), _laptop("2TB", storage="2TB")]
        assert _names(sort_items(items, LAPTOPS, "storage", "asc")) == ["512", "1TB", "2TB"]

    def test_unparseable_sorts_as_zero(self):
        items = [_laptop("16", ram="16GB"), _laptop("none", ram="?"), _laptop("8", ram="8GB")]
        assert _names(sort_items(items, LAPTOPS, "ram", "asc")) == ["none", "8", "16"]

    def test_stable_for_ties_in_both_directions(self):
        items = [
            _laptop("first", price=100),
            _laptop("cheap", price=50),
            _laptop("second", price=100),
            _laptop("third", price=100),
        ]
        assert _names(sort_items(items, LAPTOPS, "price", "asc")) == ["cheap", "first", "second", "third"]
        assert _names(sort_items(items, LAPTOPS, "price", "desc")) == ["first", "second", "third", "cheap"]

    def test_unknown_sort_key_falls_back_to_price(self):
        items = [_laptop("B", price=2), _laptop("A", price=1)]
        assert _names(sort_items(items, LAPTOPS, "gpu", "asc")) == ["A", "B"]


class TestPagination:
    """Page slicing and hasMore."""

    CONTAINERS = [
        {"laptops": [_laptop(f"L{i:02d}", price=1000 + (i % 7) * 100) for i in range(0, 20)]},
        {"laptops": [_laptop(f"L{i:02d}", price=1000 + (i % 7) * 100) for i in range(15, 30)]},
    ]

    def test_page_size(self):
        result = query_catalog(self.CONTAINERS, CatalogCriteria(), LAPTOPS)
        assert LAPTOPS.page_size == 12
        assert len(result.items) == 12
        assert result.total_results == 30

    def test_pages_cover_full_list(self):
        criteria = CatalogCriteria(sort_by="price", sort_order="desc")
        full = sort_items(flatten_unique(self.CONTAINERS, "laptops"), LAPTOPS, "price", "desc")

        collected = []
        for page in (1, 2, 3):
            criteria.page = page
            result = query_catalog(self.CONTAINERS, criteria, LAPTOPS)
            assert result.has_more == (result.total_results > page * LAPTOPS.page_size)
            collected.extend(result.items)

        assert _names(collected) == _names(full)
        assert len(set(_names(collected))) == 30

    def test_has_more(self):
        pages = [query_catalog(self.CONTAINERS, CatalogCriteria(page=p), LAPTOPS) for p in (1, 2, 3, 4)]
        assert [p.has_more for p in pages] == [True, True, False, False]
        assert [len(p.items) for p in pages] == [12, 12, 6, 0]

    def test_page_below_one_is_clamped(self):
        first = query_catalog(self.CONTAINERS, CatalogCriteria(page=1), LAPTOPS)
        for bad in (0, -3):
            result = query_catalog(self.CONTAINERS, CatalogCriteria(page=bad), LAPTOPS)
            assert _names(result.items) == _names(first.items)
            assert result.has_more is True

    def test_empty_containers(self):
        result = query_catalog([], CatalogCriteria(), LAPTOPS)
        assert result.items == []
        assert result.has_more is False
        assert result.total_results == 0
        assert result.filter_options == {
            "brands": [], "processors": [], "ramOptions": [], "storageOptions": [],
        }
