from fastapi import APIRouter, Depends, Request

from srp_lite.entrypoints.http.dependencies import (
    get_browse_results_page_use_case,
    get_resolve_active_filters_use_case,
)
from srp_lite.entrypoints.http.dtos.srp import (
    ResultsPageResponseDTO,
    SelectedFiltersRequestDTO,
    SelectedFiltersResponseDTO,
)
from srp_lite.entrypoints.http.error_responses import ErrorResponse
from srp_lite.entrypoints.http.mappers.srp_mapper import SrpMapper
from srp_lite.use_cases.browse_results_page import BrowseResultsPage
from srp_lite.use_cases.resolve_active_filters import ResolveActiveFilters


router = APIRouter(tags=["Results Page"])


@router.post(
    "/srp/selected-filters",
    response_model=SelectedFiltersResponseDTO,
    summary="Project active filter chips",
    description="""
    Resolve a results page URL into its filter state and active filter chips
    without searching inventory.

    ## Chips
    - Values missing from `available_filters` are dropped
    - Order: condition (new, used, certified), make (A-Z), then other filters
    - `certified` is not removable while `used` is selected
    """,
)
def post_selected_filters(
    body: SelectedFiltersRequestDTO,
    use_case: ResolveActiveFilters = Depends(get_resolve_active_filters_use_case),
) -> SelectedFiltersResponseDTO:
    request = SrpMapper.to_resolve_request(body)

    result = use_case.execute(request)

    return SrpMapper.to_selected_filters_response(result)


@router.get(
    "/srp/{slug_path:path}",
    response_model=ResultsPageResponseDTO,
    summary="Search a results page",
    description="""
    Search inventory for a results page URL.

    ## Filters
    - Path: `/{condition}/{make}/{model}` (e.g. `/used-vehicles/toyota`)
    - Query: `price_min`/`price_max` ranges, `is_*` switches, `search`,
      comma-separated values for everything else
    - Path values come first; query values for the same filter are added

    ## Paging and sorting
    - `page`, `items_per_page` (default 24), `sort_by`, `order` (asc/desc)

    ## Caching
    Identical filter states are served from the in-memory response cache
    (`from_cache: true`).

    Paths outside the slug grammar (no leading condition, extra segments)
    return 404.

    ## Example
    ```
    GET /v1/srp/used-vehicles/toyota?price_min=10000&price_max=30000&is_certified=true
    ```
    """,
    responses={
        422: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Validation failed",
                        "code": "VALIDATION_ERROR",
                        "errors": [{"field": "items_per_page", "message": "items_per_page must be between 1 and 200"}],
                    }
                }
            },
        },
        404: {"model": ErrorResponse, "description": "Path does not follow the slug grammar"},
        502: {"model": ErrorResponse, "description": "Inventory backend failed"},
    },
)
def get_results_page(
    slug_path: str,
    request: Request,
    use_case: BrowseResultsPage = Depends(get_browse_results_page_use_case),
) -> ResultsPageResponseDTO:
    """Results page endpoint following parse → execute → map → return pattern."""
    # 1. Map to domain request
    browse_request = SrpMapper.to_browse_request(
        path=slug_path,
        items=request.query_params.multi_items(),
        items_per_page=request.query_params.get("items_per_page"),
    )

    # 2. Execute use case
    result = use_case.execute(browse_request)

    # 3. Map to response
    return SrpMapper.to_results_page_response(result)
