from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union


Primitive = Union[str, int, float, bool]


class FilterKind(str, Enum):
    SELECT = "select"
    NUMBER = "number"
    SWITCH = "switch"
    SEARCH = "search"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Route-encoded dimensions, in path order
SLUG_FILTERS: tuple[str, ...] = ("condition", "make", "model")

# Query keys that drive paging/sorting rather than filtering
RESERVED_QUERY_KEYS: frozenset[str] = frozenset({"page", "sort_by", "order"})

SEARCH_KEY = "search"
BOOLEAN_PREFIX = "is_"
RANGE_MIN_SUFFIX = "_min"
RANGE_MAX_SUFFIX = "_max"


# ==============================================================================
# Filter values
# ==============================================================================


@dataclass(frozen=True, slots=True)
class RangeValue:
    min: int | float | None = None
    max: int | float | None = None

    def is_empty(self) -> bool:
        return self.min is None and self.max is None

    def to_dict(self) -> dict[str, int | float]:
        """JSON shape with absent bounds omitted ({"min": 10000})."""
        result: dict[str, int | float] = {}
        if self.min is not None:
            result["min"] = self.min
        if self.max is not None:
            result["max"] = self.max
        return result


FilterValue = Union[tuple[Primitive, ...], RangeValue, str]


def unique(values: Iterable[Primitive]) -> tuple[Primitive, ...]:
    """Deduplicate keeping the first occurrence of each value."""
    seen: list[Primitive] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return tuple(seen)


class FilterState(Mapping[str, FilterValue]):
    """
    Immutable filter name -> value mapping.

    Set filters are stored as tuples (order of first selection preserved),
    ranges as RangeValue and the free-text search as a plain string. Every
    change produces a new FilterState; instances are never mutated.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, FilterValue] | None = None) -> None:
        self._values: Mapping[str, FilterValue] = MappingProxyType(dict(values or {}))

    def __getitem__(self, name: str) -> FilterValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilterState):
            return dict(self._values) == dict(other._values)
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._values.items(), key=lambda item: item[0])))

    def __repr__(self) -> str:
        return f"FilterState({dict(self._values)!r})"

    def with_value(self, name: str, value: FilterValue) -> FilterState:
        return FilterState({**self._values, name: value})

    def without(self, name: str) -> FilterState:
        return FilterState({key: v for key, v in self._values.items() if key != name})

    def values_of(self, name: str) -> tuple[Primitive, ...]:
        """Selected values of a set filter; empty for ranges, search or absent names."""
        value = self._values.get(name)
        if isinstance(value, tuple):
            return value
        return ()

    def is_selected(self, name: str, value: Primitive) -> bool:
        """True when `value` is one of the selected values of set filter `name`."""
        return value in self.values_of(name)

    @property
    def search(self) -> str | None:
        value = self._values.get(SEARCH_KEY)
        return value if isinstance(value, str) else None

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible representation (sets become lists)."""
        result: dict[str, Any] = {}
        for name, value in self._values.items():
            if isinstance(value, RangeValue):
                result[name] = value.to_dict()
            elif isinstance(value, tuple):
                result[name] = list(value)
            else:
                result[name] = value
        return result


# ==============================================================================
# Filter schema
# ==============================================================================


@dataclass(frozen=True, slots=True)
class FilterSchema:
    """
    Declares the shape of every known filter name.

    Names outside the schema fall back to the query naming convention
    (`_min`/`_max` suffix, `is_` prefix, `search`), so new backend filters keep
    working before the schema learns about them.
    """

    kinds: Mapping[str, FilterKind] = field(default_factory=dict)

    def kind_of(self, name: str) -> FilterKind:
        kind = self.kinds.get(name)
        if kind is not None:
            return kind
        if name == SEARCH_KEY:
            return FilterKind.SEARCH
        if name.startswith(BOOLEAN_PREFIX):
            return FilterKind.SWITCH
        return FilterKind.SELECT

    def range_name(self, key: str) -> str | None:
        """Return the range filter a `<name>_min`/`<name>_max` key belongs to."""
        for suffix in (RANGE_MIN_SUFFIX, RANGE_MAX_SUFFIX):
            if key.endswith(suffix) and len(key) > len(suffix):
                base = key[: -len(suffix)]
                declared = self.kinds.get(base)
                if declared is None or declared is FilterKind.NUMBER:
                    return base
        return None


DEFAULT_FILTER_SCHEMA = FilterSchema(
    kinds={
        "condition": FilterKind.SELECT,
        "year": FilterKind.SELECT,
        "make": FilterKind.SELECT,
        "model": FilterKind.SELECT,
        "trim": FilterKind.SELECT,
        "body": FilterKind.SELECT,
        "fuel_type": FilterKind.SELECT,
        "transmission": FilterKind.SELECT,
        "engine": FilterKind.SELECT,
        "drive_train": FilterKind.SELECT,
        "doors": FilterKind.SELECT,
        "ext_color": FilterKind.SELECT,
        "int_color": FilterKind.SELECT,
        "dealer": FilterKind.SELECT,
        "state": FilterKind.SELECT,
        "city": FilterKind.SELECT,
        "key_features": FilterKind.SELECT,
        "price": FilterKind.NUMBER,
        "mileage": FilterKind.NUMBER,
        "is_special": FilterKind.SWITCH,
        "is_new_arrival": FilterKind.SWITCH,
        "is_in_transit": FilterKind.SWITCH,
        "is_sale_pending": FilterKind.SWITCH,
        "is_commercial": FilterKind.SWITCH,
        "is_certified": FilterKind.SWITCH,
        "search": FilterKind.SEARCH,
    }
)


# ==============================================================================
# Catalog metadata and chips
# ==============================================================================


@dataclass(frozen=True, slots=True)
class FilterOption:
    value: Primitive
    label: str
    count: int = 0


@dataclass(frozen=True, slots=True)
class AvailableFilter:
    """Catalog entry supplied by the inventory backend (read-only)."""

    name: str
    label: str
    type: FilterKind
    options: tuple[FilterOption, ...] = ()
    bounds: tuple[int | float, int | float] | None = None

    def find_option(self, value: Primitive) -> FilterOption | None:
        """Look up an option by value; "2024" matches 2024."""
        for option in self.options:
            if option.value == value and type(option.value) is type(value):
                return option
        for option in self.options:
            if _as_text(option.value) == _as_text(value):
                return option
        return None


@dataclass(frozen=True, slots=True)
class SelectedFilter:
    """
    One display-ready active filter ("chip").

    `removable` is a UI hint: certified is implied while used is selected, so
    its chip is rendered without a removal control.
    """

    name: str
    label: str
    value: Primitive | RangeValue
    type: FilterKind
    removable: bool = True


def _as_text(value: Primitive) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
