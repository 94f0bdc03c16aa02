"""
Test suite for the results page routes.

- GET /v1/srp/{slug_path} resolves the URL, searches (through the response
  cache) and returns rows, catalog and chips
- POST /v1/srp/selected-filters projects chips without searching
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from srp_lite.adapters.in_memory_inventory_fetcher import InMemoryInventoryFetcher
from srp_lite.domain.errors import UpstreamError
from srp_lite.domain.vehicle import Vehicle
from srp_lite.entrypoints.http.dependencies import get_browse_results_page_use_case
from srp_lite.entrypoints.http.exception_handlers import register_exception_handlers
from srp_lite.entrypoints.http.routes.srp import router
from srp_lite.infra.cache.response_cache import ResponseCache
from srp_lite.use_cases.search_inventory import SearchInventory


@pytest.fixture
def fetcher() -> InMemoryInventoryFetcher:
    return InMemoryInventoryFetcher(
        [
            Vehicle(id="1", condition="used", make="Toyota", model="Camry", year=2020, price=18000, is_certified=True),
            Vehicle(id="2", condition="used", make="Toyota", model="Corolla", year=2019, price=14000),
            Vehicle(id="3", condition="new", make="Honda", model="Civic", year=2025, price=26000),
        ]
    )


@pytest.fixture
def cache() -> ResponseCache:
    return ResponseCache(capacity=10)


@pytest.fixture
def app(fetcher: InMemoryInventoryFetcher, cache: ResponseCache) -> FastAPI:
    """Create a test FastAPI app with the results page router and exception handlers."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")
    test_app.state.search_inventory = SearchInventory(inventory_fetcher=fetcher, response_cache=cache)
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


# ==============================================================================
# GET /v1/srp/{slug_path}
# ==============================================================================


def test_used_toyota_with_price_and_certified(client: TestClient) -> None:
    response = client.get(
        "/v1/srp/used-vehicles/toyota",
        params={"price_min": "10000", "price_max": "30000", "is_certified": "true"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["filters"] == {
        "condition": ["used"],
        "make": ["toyota"],
        "price": {"min": 10000, "max": 30000},
        "is_certified": [True],
    }
    assert [vehicle["id"] for vehicle in data["vehicles"]] == ["1"]
    assert data["total"] == 1
    assert [(chip["name"], chip["label"]) for chip in data["selected_filters"]] == [
        ("condition", "Used"),
        ("make", "Toyota"),
        ("price", "Price"),
        ("is_certified", "Certified"),
    ]
    assert data["from_cache"] is False


def test_second_identical_request_is_served_from_cache(
    client: TestClient, fetcher: InMemoryInventoryFetcher
) -> None:
    first = client.get("/v1/srp/used-vehicles/", params=[("make", "toyota"), ("make", "honda")])
    second = client.get("/v1/srp/used-vehicles/", params={"make": "honda,toyota"})

    assert first.json()["from_cache"] is False
    assert second.json()["from_cache"] is True
    assert second.json()["cache_key"] == first.json()["cache_key"]
    assert len(fetcher.calls) == 1


def test_paging_and_sorting(client: TestClient) -> None:
    response = client.get(
        "/v1/srp/used-vehicles/",
        params={"sort_by": "price", "order": "asc", "page": "2", "items_per_page": "1"},
    )

    data = response.json()
    assert response.status_code == 200
    assert [vehicle["id"] for vehicle in data["vehicles"]] == ["1"]
    assert data["page"] == 2
    assert data["items_per_page"] == 1
    assert data["sorting"] == {"sort_by": "price", "order": "asc", "page": 2}
    assert "items_per_page" not in data["filters"]


def test_empty_path_searches_everything(client: TestClient) -> None:
    response = client.get("/v1/srp/")

    assert response.status_code == 200
    assert response.json()["total"] == 3
    assert response.json()["selected_filters"] == []


def test_malformed_range_is_ignored(client: TestClient) -> None:
    response = client.get("/v1/srp/used-vehicles/", params={"price_min": "cheap"})

    assert response.status_code == 200
    assert "price" not in response.json()["filters"]


def test_items_per_page_out_of_range_returns_422(client: TestClient) -> None:
    response = client.get("/v1/srp/used-vehicles/", params={"items_per_page": "500"})

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "items_per_page"


def test_path_outside_slug_grammar_returns_404(client: TestClient, fetcher: InMemoryInventoryFetcher) -> None:
    response = client.get("/v1/srp/bogus/x")

    assert response.status_code == 404
    assert response.json() == {"detail": "Results page 'bogus/x' not found", "code": "NOT_FOUND"}
    assert fetcher.calls == []


def test_upstream_failure_returns_502(app: FastAPI, client: TestClient) -> None:
    mock_use_case = Mock()
    mock_use_case.execute.side_effect = UpstreamError("Inventory search failed")
    app.dependency_overrides[get_browse_results_page_use_case] = lambda: mock_use_case

    response = client.get("/v1/srp/used-vehicles/")

    assert response.status_code == 502
    assert response.json() == {"detail": "Inventory search failed", "code": "UPSTREAM_ERROR"}


# ==============================================================================
# POST /v1/srp/selected-filters
# ==============================================================================


def test_selected_filters_projection(client: TestClient, fetcher: InMemoryInventoryFetcher) -> None:
    response = client.post(
        "/v1/srp/selected-filters",
        json={
            "path": "/used-vehicles/certified/",
            "query": {"make": ["toyota"], "year": "2020"},
            "available_filters": [
                {
                    "name": "condition",
                    "label": "Condition",
                    "type": "select",
                    "options": [{"value": "certified", "label": "Certified"}],
                },
                {
                    "name": "make",
                    "label": "Make",
                    "type": "select",
                    "options": [{"value": "toyota", "label": "Toyota"}],
                },
                {
                    "name": "year",
                    "label": "Year",
                    "type": "select",
                    "options": [{"value": 2020, "label": "2020"}],
                },
            ],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["filters"] == {"condition": ["certified"], "make": ["toyota"], "year": ["2020"]}
    assert [(chip["name"], chip["label"], chip["removable"]) for chip in data["selected_filters"]] == [
        ("condition", "Certified", True),
        ("make", "Toyota", True),
        ("year", "2020", True),
    ]
    assert data["is_valid_path"] is True
    assert fetcher.calls == []


def test_selected_filters_flags_path_outside_slug_grammar(client: TestClient) -> None:
    response = client.post("/v1/srp/selected-filters", json={"path": "/bogus/x", "query": {"make": "toyota"}})

    assert response.status_code == 200
    assert response.json()["is_valid_path"] is False
    assert response.json()["filters"] == {"make": ["toyota"]}


def test_selected_filters_rejects_unknown_filter_type(client: TestClient) -> None:
    response = client.post(
        "/v1/srp/selected-filters",
        json={"available_filters": [{"name": "make", "label": "Make", "type": "slider"}]},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"
