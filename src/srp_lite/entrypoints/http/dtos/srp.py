from datetime import datetime
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

FilterTypeDTO = Literal["select", "number", "switch", "search"]
OptionValueDTO = Union[bool, int, float, str]


class FilterOptionDTO(BaseModel):
    value: OptionValueDTO
    label: str
    count: int = 0


class AvailableFilterDTO(BaseModel):
    """Catalog entry describing one filter and its permitted values."""

    name: str = Field(examples=["make"])
    label: str = Field(examples=["Make"])
    type: FilterTypeDTO = Field(examples=["select"])
    options: list[FilterOptionDTO] = Field(default_factory=list)
    bounds: tuple[float, float] | None = Field(
        default=None,
        description="Lowest and highest value for number filters",
    )


class SelectedFilterDTO(BaseModel):
    name: str
    label: str
    value: Union[OptionValueDTO, dict[str, float]]
    type: FilterTypeDTO
    removable: bool = Field(
        default=True,
        description="False when the chip is implied by another selection (certified while used is selected)",
    )


class SortingDTO(BaseModel):
    sort_by: str | None = None
    order: Literal["asc", "desc"] | None = None
    page: int | None = None


class SelectedFiltersRequestDTO(BaseModel):
    """Request payload for projecting active filter chips from a URL."""

    path: str = Field(
        default="/",
        description="Results page path carrying condition/make/model",
        examples=["/used-vehicles/toyota/"],
    )
    query: dict[str, Union[str, list[str]]] = Field(
        default_factory=dict,
        description="Query string parameters (repeated keys as lists)",
    )
    available_filters: list[AvailableFilterDTO] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "path": "/used-vehicles/toyota/",
                "query": {"price_min": "10000", "price_max": "30000", "is_certified": "true"},
                "available_filters": [
                    {
                        "name": "make",
                        "label": "Make",
                        "type": "select",
                        "options": [{"value": "toyota", "label": "Toyota", "count": 12}],
                    }
                ],
            }
        }
    )


class SelectedFiltersResponseDTO(BaseModel):
    filters: dict[str, Any]
    sorting: SortingDTO
    selected_filters: list[SelectedFilterDTO]
    is_valid_path: bool = Field(description="Whether the path follows the condition/make/model slug grammar")


class ResultsPageResponseDTO(BaseModel):
    filters: dict[str, Any]
    sorting: SortingDTO
    vehicles: list[dict[str, Any]]
    total: int
    page: int
    items_per_page: int
    available_filters: list[AvailableFilterDTO]
    available_sorting: list[str]
    selected_filters: list[SelectedFilterDTO]
    cache_key: str = Field(description="Canonical key of this filter state; track the latest request by it")
    from_cache: bool


class RevalidateRequestDTO(BaseModel):
    """Webhook payload; the dealer is always taken from server configuration."""

    tags: list[str] = Field(
        default_factory=list,
        description="Specific tags to invalidate in addition to the dealer-wide tags",
        examples=[["form:5f0c", "494a1788:vdp:new-2024-toyota-camry"]],
    )


class RevalidateResponseDTO(BaseModel):
    success: bool = True
    invalidated: list[str]
    timestamp: datetime
