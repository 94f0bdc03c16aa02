"""Test suite for the results page route slug grammar."""

from __future__ import annotations

import pytest

from srp_lite.domain.slug import SlugGrammar, normalize_for_url, parse_slug, split_path


# ==============================================================================
# parse_slug()
# ==============================================================================


def test_empty_path_is_valid_and_unfiltered() -> None:
    parsed = parse_slug([])

    assert parsed.is_valid
    assert parsed.filters == {}


def test_condition_only() -> None:
    parsed = parse_slug(["new-vehicles"])

    assert parsed.is_valid
    assert parsed.filters == {"condition": ("new",)}


def test_condition_and_make() -> None:
    parsed = parse_slug(["used-vehicles", "toyota"])

    assert parsed.filters == {"condition": ("used",), "make": ("toyota",)}


def test_condition_make_and_model() -> None:
    parsed = parse_slug(["new-vehicles", "Honda", "Accord"])

    assert parsed.is_valid
    assert parsed.filters == {"condition": ("new",), "make": ("honda",), "model": ("accord",)}


def test_used_certified_narrows_to_certified() -> None:
    parsed = parse_slug(["used-vehicles", "certified"])

    assert parsed.filters == {"condition": ("certified",)}


def test_certified_page_with_make() -> None:
    parsed = parse_slug(["used-vehicles", "certified", "toyota"])

    assert parsed.filters == {"condition": ("certified",), "make": ("toyota",)}


def test_multiple_condition_segments() -> None:
    parsed = parse_slug(["new-vehicles", "used-vehicles", "ford"])

    assert parsed.filters == {"condition": ("new", "used"), "make": ("ford",)}


def test_unknown_first_segment_is_invalid() -> None:
    parsed = parse_slug(["boats"])

    assert not parsed.is_valid
    assert parsed.filters == {}


def test_extra_segments_are_invalid() -> None:
    parsed = parse_slug(["new-vehicles", "honda", "accord", "extra"])

    assert not parsed.is_valid
    assert parsed.filters["model"] == ("accord",)


def test_used_includes_certified_option() -> None:
    grammar = SlugGrammar(used_includes_certified=True)

    assert grammar.parse(["used-vehicles"]).filters == {"condition": ("used", "certified")}


# ==============================================================================
# Helpers
# ==============================================================================


def test_split_path() -> None:
    assert split_path("/used-vehicles/toyota/") == ["used-vehicles", "toyota"]
    assert split_path("/") == []


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Ford F-150", "ford-f-150"),
        ("Café Racer", "cafe-racer"),
        ("Land  Rover", "land-rover"),
        ("--Mini--", "mini"),
        ("", ""),
    ],
)
def test_normalize_for_url(text: str, expected: str) -> None:
    assert normalize_for_url(text) == expected
