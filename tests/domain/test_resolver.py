"""Test suite for the filter state resolver (path slug + query merge)."""

from __future__ import annotations

import pytest

from srp_lite.domain.filters import FilterKind, FilterSchema, FilterState, RangeValue, SortOrder
from srp_lite.domain.resolver import (
    FilterStateResolver,
    Sorting,
    merge_filters,
    parse_number,
    parse_query_filters,
    resolve,
    resolve_sorting,
)
from srp_lite.domain.slug import SlugGrammar


# ==============================================================================
# Merge Precedence
# ==============================================================================


def test_slug_values_come_first_in_union() -> None:
    merged = merge_filters(FilterState({"condition": ("new",)}), FilterState({"condition": ("used",)}))

    assert merged["condition"] == ("new", "used")


def test_union_is_deduplicated() -> None:
    merged = merge_filters(
        FilterState({"make": ("toyota",)}),
        FilterState({"make": ("honda", "toyota")}),
    )

    assert merged["make"] == ("toyota", "honda")


def test_query_only_filters_pass_through() -> None:
    merged = merge_filters(FilterState(), FilterState({"body": ("suv",)}))

    assert merged == {"body": ("suv",)}


def test_slug_dimensions_are_ordered_first() -> None:
    merged = merge_filters(
        FilterState({"make": ("toyota",)}),
        FilterState({"body": ("suv",), "condition": ("used",)}),
    )

    assert list(merged) == ["condition", "make", "body"]


def test_resolve_slug_and_query() -> None:
    state = resolve(["new-vehicles"], {"condition": "used"})

    assert state["condition"] == ("new", "used")


def test_range_from_query_only() -> None:
    state = resolve([], {"price_min": "10000"})

    assert state == {"price": RangeValue(min=10000)}


# ==============================================================================
# Query Parsing
# ==============================================================================


def test_comma_separated_values_are_split() -> None:
    state = parse_query_filters({"make": "toyota, honda,"})

    assert state["make"] == ("toyota", "honda")


def test_repeated_keys_accumulate() -> None:
    state = parse_query_filters({"body": ["suv", "sedan", "suv"]})

    assert state["body"] == ("suv", "sedan")


def test_switch_true_and_false() -> None:
    state = parse_query_filters({"is_certified": "true", "is_special": "False"})

    assert state["is_certified"] == (True,)
    assert state["is_special"] == (False,)


def test_search_is_kept_as_text() -> None:
    state = parse_query_filters({"search": "camry hybrid"})

    assert state.search == "camry hybrid"


def test_reserved_keys_are_not_filters() -> None:
    state = parse_query_filters({"page": "2", "sort_by": "price", "order": "desc"})

    assert state == {}


def test_range_with_both_bounds() -> None:
    state = parse_query_filters({"price_min": "10,000", "price_max": "30000.5"})

    assert state["price"] == RangeValue(min=10000, max=30000.5)


def test_malformed_bound_is_dropped() -> None:
    state = parse_query_filters({"price_min": "abc", "price_max": "30000"})

    assert state["price"] == RangeValue(max=30000)


def test_range_without_valid_bounds_is_omitted() -> None:
    state = parse_query_filters({"mileage_min": "NaN", "mileage_max": ""})

    assert "mileage" not in state


def test_bare_range_name_is_ignored() -> None:
    assert parse_query_filters({"price": "10000"}) == {}


def test_empty_values_are_ignored() -> None:
    assert parse_query_filters({"make": ",", "body": []}) == {}


def test_explicit_schema_overrides_convention() -> None:
    schema = FilterSchema(kinds={"is_featured": FilterKind.SELECT, "towing": FilterKind.NUMBER})

    state = parse_query_filters({"is_featured": "gold", "towing_min": "3500"}, schema=schema)

    assert state["is_featured"] == ("gold",)
    assert state["towing"] == RangeValue(min=3500)


def test_resolver_never_raises_on_garbage() -> None:
    state = resolve(["not-a-condition", "x"], {"price_min": "1e999", "year": "", "is_special": "maybe"})

    assert state == {"is_special": (False,)}


# ==============================================================================
# End-to-End
# ==============================================================================


def test_used_toyota_with_price_and_certified() -> None:
    state = FilterStateResolver().resolve_path(
        "/used-vehicles/toyota/",
        {"price_min": "10000", "price_max": "30000", "is_certified": "true"},
    )

    assert state.to_dict() == {
        "condition": ["used"],
        "make": ["toyota"],
        "price": {"min": 10000, "max": 30000},
        "is_certified": [True],
    }


def test_resolver_with_used_including_certified() -> None:
    resolver = FilterStateResolver(grammar=SlugGrammar(used_includes_certified=True))

    state = resolver.resolve(["used-vehicles"], {})

    assert state["condition"] == ("used", "certified")


def test_resolve_page_flags_valid_path() -> None:
    page = FilterStateResolver().resolve_page("/new-vehicles/honda/accord/", {"year": "2024"})

    assert page.is_valid_path
    assert page.filters == {"condition": ("new",), "make": ("honda",), "model": ("accord",), "year": ("2024",)}


def test_resolve_page_flags_path_without_condition() -> None:
    page = FilterStateResolver().resolve_page("/bogus/x", {"make": "toyota"})

    assert not page.is_valid_path
    assert page.filters == {"make": ("toyota",)}


def test_resolve_page_keeps_filters_of_overlong_path() -> None:
    page = FilterStateResolver().resolve_page("/used-vehicles/toyota/camry/extra/", {})

    assert not page.is_valid_path
    assert page.filters == {"condition": ("used",), "make": ("toyota",), "model": ("camry",)}


# ==============================================================================
# Sorting
# ==============================================================================


def test_resolve_sorting() -> None:
    sorting = resolve_sorting({"sort_by": "price", "order": "DESC", "page": "3"})

    assert sorting == Sorting(sort_by="price", order=SortOrder.DESC, page=3)


def test_resolve_sorting_defaults() -> None:
    assert resolve_sorting(None) == Sorting()


@pytest.mark.parametrize("raw_page", ["0", "-1", "2.5", "abc"])
def test_invalid_page_is_ignored(raw_page: str) -> None:
    assert resolve_sorting({"page": raw_page}).page is None


def test_unknown_order_is_ignored() -> None:
    assert resolve_sorting({"order": "sideways"}).order is None


# ==============================================================================
# parse_number()
# ==============================================================================


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("10000", 10000),
        (" 99.5 ", 99.5),
        ("1,250", 1250),
        ("abc", None),
        ("", None),
        ("nan", None),
        ("inf", None),
    ],
)
def test_parse_number(raw: str, expected: int | float | None) -> None:
    assert parse_number(raw) == expected
