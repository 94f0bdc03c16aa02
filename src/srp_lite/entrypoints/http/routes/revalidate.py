from fastapi import APIRouter, Depends, Header

from srp_lite.entrypoints.http.dependencies import get_revalidate_cache_use_case
from srp_lite.entrypoints.http.dtos.srp import RevalidateRequestDTO, RevalidateResponseDTO
from srp_lite.entrypoints.http.error_responses import ErrorResponse
from srp_lite.entrypoints.http.mappers.srp_mapper import SrpMapper
from srp_lite.use_cases.revalidate_cache import RevalidateCache, RevalidateCacheRequest


router = APIRouter(tags=["Cache"])


@router.post(
    "/revalidate",
    response_model=RevalidateResponseDTO,
    summary="Invalidate cached dealer data",
    description="""
    Webhook for tag-based cache invalidation.

    Every dealer-wide tag of the configured dealer is invalidated, plus any
    `tags` in the body (e.g. `form:{id}`, `{dealer}:vdp:{slug}`).

    Requires the `x-revalidation-secret` header.
    """,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid secret"},
        500: {"model": ErrorResponse, "description": "Revalidation secret not configured"},
    },
)
def post_revalidate(
    body: RevalidateRequestDTO,
    secret: str | None = Header(default=None, alias="x-revalidation-secret"),
    use_case: RevalidateCache = Depends(get_revalidate_cache_use_case),
) -> RevalidateResponseDTO:
    result = use_case.execute(RevalidateCacheRequest(secret=secret, tags=body.tags))

    return SrpMapper.to_revalidate_response(result)
