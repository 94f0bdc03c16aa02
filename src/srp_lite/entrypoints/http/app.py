from fastapi import FastAPI

from srp_lite.adapters.in_memory_inventory_fetcher import InMemoryInventoryFetcher
from srp_lite.adapters.response_cache_tag_invalidator import ResponseCacheTagInvalidator
from srp_lite.entrypoints.http.exception_handlers import register_exception_handlers
from srp_lite.entrypoints.http.routes.health import router as health_router
from srp_lite.entrypoints.http.routes.revalidate import router as revalidate_router
from srp_lite.entrypoints.http.routes.srp import router as srp_router
from srp_lite.infra.cache.response_cache import ResponseCache
from srp_lite.infra.config import filter_cache_capacity
from srp_lite.ports.inventory_fetcher import InventoryFetcher
from srp_lite.ports.tag_invalidator import TagInvalidator
from srp_lite.use_cases.search_inventory import SearchInventory


def build_app(
    inventory_fetcher: InventoryFetcher | None = None,
    response_cache: ResponseCache | None = None,
    tag_invalidator: TagInvalidator | None = None,
) -> FastAPI:
    app = FastAPI(
        title="SRP Lite API",
        description="""
        Search results page engine for a multi-tenant vehicle storefront.

        ## Features
        - Resolve results page URLs (path slug + query) into a filter state
        - Search inventory with an in-memory FIFO response cache
        - Project active filter chips
        - Tag-based cache revalidation webhook

        ## Error Handling
        All errors return structured JSON responses with error codes.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # One cache per app instance, shared by every request
    if response_cache is None:
        response_cache = ResponseCache(capacity=filter_cache_capacity())
    app.state.response_cache = response_cache
    app.state.inventory_fetcher = inventory_fetcher or InMemoryInventoryFetcher([])
    app.state.tag_invalidator = tag_invalidator or ResponseCacheTagInvalidator(response_cache)
    # One search per app; it tracks the latest request key
    app.state.search_inventory = SearchInventory(
        inventory_fetcher=app.state.inventory_fetcher,
        response_cache=response_cache,
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(srp_router, prefix="/v1")
    app.include_router(revalidate_router, prefix="/v1")

    return app


app = build_app()
