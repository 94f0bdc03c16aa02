from __future__ import annotations

from typing import Any

from srp_lite.domain.filters import (
    SEARCH_KEY,
    AvailableFilter,
    FilterKind,
    FilterOption,
    FilterState,
    Primitive,
    RangeValue,
    SortOrder,
)
from srp_lite.domain.slug import normalize_for_url
from srp_lite.domain.vehicle import Vehicle
from srp_lite.ports.inventory_fetcher import (
    FetchResult,
    FilterCatalog,
    InventoryFetcher,
    InventoryPage,
    InventoryQuery,
)

SELECT_FILTERS: dict[str, str] = {
    "condition": "Condition",
    "year": "Year",
    "make": "Make",
    "model": "Model",
    "body": "Body Style",
    "fuel_type": "Fuel Type",
    "ext_color": "Exterior Color",
}
RANGE_FILTERS: dict[str, str] = {"price": "Price", "mileage": "Mileage"}
SWITCH_FILTERS: dict[str, str] = {
    "is_special": "Special",
    "is_certified": "Certified",
    "is_new_arrival": "New Arrival",
}
SORTABLE_FIELDS: tuple[str, ...] = ("price", "year", "mileage")
MAX_RECORDED_CALLS = 100


class InMemoryInventoryFetcher(InventoryFetcher):
    """
    Canonical contract implementation for tests and local runs.

    - Stores vehicles in insertion order
    - Applies AND semantics across filters, OR within a filter's values
    - Applies sorting, then paging, AFTER filtering
    - Facet counts for a filter ignore that filter's own selection
    - Records the most recent queries it answers in `calls`
    """

    def __init__(self, vehicles: list[Vehicle]) -> None:
        self._vehicles = vehicles
        self.calls: list[InventoryQuery] = []

    def fetch(self, query: InventoryQuery) -> FetchResult:
        self.calls.append(query)
        del self.calls[:-MAX_RECORDED_CALLS]

        matches = [vehicle for vehicle in self._vehicles if self._matches(vehicle, query.filters)]
        matches = self._sorted(matches, query.sort_by, query.order)

        start = (max(query.page, 1) - 1) * query.items_per_page
        rows = matches[start : start + query.items_per_page]

        return FetchResult(
            payload=InventoryPage(
                vehicles=[vehicle.to_dict() for vehicle in rows],
                total_count=len(matches),
                page=query.page,
                items_per_page=query.items_per_page,
            ),
            filter_payload=self._catalog(query.filters),
        )

    def _matches(self, vehicle: Vehicle, filters: FilterState, skip: str | None = None) -> bool:
        for name, value in filters.items():
            if name == skip:
                continue
            if name == SEARCH_KEY:
                if isinstance(value, str) and value.strip().lower() not in vehicle.title.lower():
                    return False
                continue

            attribute = getattr(vehicle, name, None)
            if isinstance(value, RangeValue):
                if attribute is None:
                    return False
                if value.min is not None and attribute < value.min:
                    return False
                if value.max is not None and attribute > value.max:
                    return False
            elif isinstance(value, tuple) and value:
                if isinstance(attribute, bool):
                    if attribute not in value:
                        return False
                elif name == "condition" and vehicle.is_certified and "certified" in value:
                    continue
                elif _option_value(attribute) not in {_option_value(item) for item in value}:
                    return False
        return True

    def _sorted(self, vehicles: list[Vehicle], sort_by: str | None, order: SortOrder | None) -> list[Vehicle]:
        if sort_by not in SORTABLE_FIELDS:
            return vehicles
        return sorted(
            vehicles,
            key=lambda vehicle: getattr(vehicle, sort_by),
            reverse=order is SortOrder.DESC,
        )

    def _catalog(self, filters: FilterState) -> FilterCatalog:
        available: list[AvailableFilter] = []

        for name, label in SELECT_FILTERS.items():
            counts: dict[str, int] = {}
            labels: dict[str, str] = {}
            for vehicle in self._vehicles:
                if not self._matches(vehicle, filters, skip=name):
                    continue
                attribute = getattr(vehicle, name)
                if attribute is None:
                    continue
                value = _option_value(attribute)
                counts[value] = counts.get(value, 0) + 1
                labels.setdefault(value, _option_label(name, attribute))
            if name == "condition":
                certified = sum(
                    1 for vehicle in self._vehicles
                    if vehicle.is_certified and self._matches(vehicle, filters, skip=name)
                )
                if certified:
                    counts["certified"] = certified
                    labels["certified"] = "Certified"
            options = tuple(
                FilterOption(value=value, label=labels[value], count=count)
                for value, count in sorted(counts.items(), key=lambda item: labels[item[0]].casefold())
            )
            available.append(AvailableFilter(name=name, label=label, type=FilterKind.SELECT, options=options))

        for name, label in RANGE_FILTERS.items():
            values = [getattr(vehicle, name) for vehicle in self._vehicles]
            bounds = (min(values), max(values)) if values else None
            available.append(AvailableFilter(name=name, label=label, type=FilterKind.NUMBER, bounds=bounds))

        for name, label in SWITCH_FILTERS.items():
            count = sum(1 for vehicle in self._vehicles if getattr(vehicle, name))
            available.append(
                AvailableFilter(
                    name=name,
                    label=label,
                    type=FilterKind.SWITCH,
                    options=(FilterOption(value=True, label=label, count=count),),
                )
            )

        return FilterCatalog(
            available_filters=tuple(available),
            available_sorting=SORTABLE_FIELDS,
        )


def _option_value(attribute: Any) -> str:
    return normalize_for_url(str(attribute))


def _option_label(name: str, attribute: Primitive) -> str:
    if name == "condition":
        return str(attribute).capitalize()
    return str(attribute)
