"""
Route slug grammar for results pages.

Paths follow /{condition}/{make}/{model}/:

- /new-vehicles/                → condition=new
- /used-vehicles/toyota/        → condition=used, make=toyota
- /new-vehicles/honda/accord/   → condition=new, make=honda, model=accord
- /used-vehicles/certified/     → condition=certified (certified only)
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Sequence

from srp_lite.domain.filters import FilterState

CONDITION_SLUGS: dict[str, str] = {
    "new": "new-vehicles",
    "used": "used-vehicles",
    "certified": "certified",
}

SLUG_TO_CONDITION: dict[str, str] = {slug: condition for condition, slug in CONDITION_SLUGS.items()}

_NON_URL_CHARS = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN = re.compile(r"-+")


@dataclass(frozen=True, slots=True)
class ParsedSlug:
    filters: FilterState
    is_valid: bool


@dataclass(frozen=True, slots=True)
class SlugGrammar:
    """
    Parser for condition/make/model path segments.

    `used_includes_certified` enables the storefront rule where a used
    inventory page also lists certified vehicles (/used-vehicles/ resolves
    to used + certified).
    """

    used_includes_certified: bool = False

    def parse(self, segments: Sequence[str] | None) -> ParsedSlug:
        if not segments:
            return ParsedSlug(FilterState(), is_valid=True)

        conditions: list[str] = []
        index = 0

        while index < len(segments) and segments[index] in SLUG_TO_CONDITION:
            condition = SLUG_TO_CONDITION[segments[index]]

            # /used-vehicles/certified/ narrows the page to certified only
            if condition == "certified" and index == 1 and "used" in conditions:
                conditions = ["certified"]
                index += 1
                break

            if condition not in conditions:
                conditions.append(condition)
            index += 1

        if not conditions:
            return ParsedSlug(FilterState(), is_valid=False)

        if self.used_includes_certified and "used" in conditions and "certified" not in conditions:
            conditions.append("certified")

        values: dict[str, tuple[str, ...]] = {"condition": tuple(conditions)}

        if index < len(segments) and segments[index] not in SLUG_TO_CONDITION:
            values["make"] = (segments[index].lower(),)
            index += 1

        if "make" in values and index < len(segments) and segments[index] not in SLUG_TO_CONDITION:
            values["model"] = (segments[index].lower(),)
            index += 1

        return ParsedSlug(FilterState(values), is_valid=index >= len(segments))


DEFAULT_SLUG_GRAMMAR = SlugGrammar()


def parse_slug(segments: Sequence[str] | None) -> ParsedSlug:
    """Parse path segments with the default grammar."""
    return DEFAULT_SLUG_GRAMMAR.parse(segments)


def split_path(path: str) -> list[str]:
    """'/used-vehicles/toyota/' -> ['used-vehicles', 'toyota']"""
    return [part for part in path.split("/") if part]


def normalize_for_url(text: str) -> str:
    """
    Convert display text to a URL slug segment.

    "Ford F-150" -> "ford-f-150", "Café Racer" -> "cafe-racer".
    """
    if not text:
        return ""

    normalized = unicodedata.normalize("NFD", text.lower())
    normalized = "".join(char for char in normalized if not unicodedata.combining(char))
    normalized = _NON_URL_CHARS.sub("-", normalized)
    normalized = _HYPHEN_RUN.sub("-", normalized)
    return normalized.strip("-")
