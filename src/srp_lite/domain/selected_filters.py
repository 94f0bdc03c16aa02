"""Projection of filter state into display-ready active filter chips."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from srp_lite.domain.filters import (
    SEARCH_KEY,
    SLUG_FILTERS,
    AvailableFilter,
    FilterKind,
    FilterState,
    Primitive,
    RangeValue,
    SelectedFilter,
)

# Lower sorts first; names not listed share the last tier
FILTER_PRIORITY: dict[str, int] = {"condition": 1, "make": 2}
DEFAULT_PRIORITY = 3

CONDITION_ORDER: dict[str, int] = {"new": 1, "used": 2, "certified": 3}
UNKNOWN_CONDITION_ORDER = 999


def project_selected_filters(
    filter_state: FilterState,
    available_filters: Sequence[AvailableFilter],
) -> list[SelectedFilter]:
    """
    Build the ordered list of active filter chips.

    Values without a catalog entry are dropped rather than shown unlabeled.
    Each (name, value) pair produces at most one chip. Chips are ordered
    condition first (new, used, certified), then make (A-Z), then the other
    filters in the order they were selected, each group sorted by label
    (year newest first).
    """
    catalog = {available.name: available for available in available_filters}
    chips: list[SelectedFilter] = []
    seen: set[tuple[str, str]] = set()

    for name in _projection_order(filter_state):
        value = filter_state[name]
        available = catalog.get(name)
        if available is None or name == SEARCH_KEY:
            continue

        if isinstance(value, RangeValue):
            if available.type is FilterKind.NUMBER and not value.is_empty():
                chips.append(SelectedFilter(name=name, label=available.label, value=value, type=FilterKind.NUMBER))
            continue

        if not isinstance(value, tuple):
            continue

        if available.type is FilterKind.SWITCH or isinstance(_first(value), bool):
            if True in value and _mark_seen(seen, name, True):
                chips.append(SelectedFilter(name=name, label=available.label, value=True, type=FilterKind.SWITCH))
            continue

        if available.type is not FilterKind.SELECT:
            continue

        for item in value:
            option = available.find_option(item)
            if option is None or not option.label:
                continue
            if _mark_seen(seen, name, item):
                chips.append(SelectedFilter(name=name, label=option.label, value=item, type=FilterKind.SELECT))

    return _suppress_implied(_sort_chips(chips))


def _projection_order(filter_state: FilterState) -> list[str]:
    names = [name for name in SLUG_FILTERS if name in filter_state]
    names.extend(name for name in filter_state if name not in SLUG_FILTERS)
    return names


def _sort_chips(chips: Iterable[SelectedFilter]) -> list[SelectedFilter]:
    # Python's sort is stable: groups keep first-encounter order within a tier
    groups: dict[str, list[SelectedFilter]] = {}
    for chip in chips:
        groups.setdefault(chip.name, []).append(chip)

    ordered_names = sorted(groups, key=lambda name: FILTER_PRIORITY.get(name, DEFAULT_PRIORITY))

    result: list[SelectedFilter] = []
    for name in ordered_names:
        result.extend(_sort_group(name, groups[name]))
    return result


def _sort_group(name: str, chips: list[SelectedFilter]) -> list[SelectedFilter]:
    if name == "condition":
        return sorted(chips, key=lambda chip: CONDITION_ORDER.get(str(chip.value), UNKNOWN_CONDITION_ORDER))
    if name == "year":
        if all(_is_integer_label(chip.label) for chip in chips):
            return sorted(chips, key=lambda chip: int(chip.label.strip()), reverse=True)
        return sorted(chips, key=lambda chip: chip.label.casefold(), reverse=True)
    return sorted(chips, key=lambda chip: chip.label.casefold())


def _suppress_implied(chips: list[SelectedFilter]) -> list[SelectedFilter]:
    """While used is selected certified is implied, so its chip is not removable."""
    has_used = any(chip.name == "condition" and chip.value == "used" for chip in chips)
    if not has_used:
        return chips
    return [
        SelectedFilter(chip.name, chip.label, chip.value, chip.type, removable=False)
        if chip.name == "condition" and chip.value == "certified"
        else chip
        for chip in chips
    ]


def _mark_seen(seen: set[tuple[str, str]], name: str, value: Primitive) -> bool:
    key = (name, str(value))
    if key in seen:
        return False
    seen.add(key)
    return True


def _first(values: tuple[Primitive, ...]) -> Primitive | None:
    return values[0] if values else None


def _is_integer_label(label: str) -> bool:
    text = label.strip()
    return text.lstrip("-").isdigit()
