"""Tests for FastAPI exception handlers."""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from srp_lite.domain.errors import (
    ConfigurationError,
    DomainError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from srp_lite.entrypoints.http.exception_handlers import register_exception_handlers


@pytest.fixture
def app() -> FastAPI:
    """Create a minimal FastAPI app with exception handlers registered."""
    test_app = FastAPI()
    register_exception_handlers(test_app)

    @test_app.get("/validation-error")
    def raise_validation_error() -> None:
        raise ValidationError(errors=[{"field": "page", "message": "page must be >= 1"}])

    @test_app.get("/not-found-error")
    def raise_not_found_error() -> None:
        raise NotFoundError("Results page", "/bogus/")

    @test_app.get("/unauthorized-error")
    def raise_unauthorized_error() -> None:
        raise UnauthorizedError("Invalid secret")

    @test_app.get("/upstream-error")
    def raise_upstream_error() -> None:
        raise UpstreamError("Inventory search failed", hostname="dealer.example.com")

    @test_app.get("/configuration-error")
    def raise_configuration_error() -> None:
        raise ConfigurationError("Server configuration error")

    @test_app.get("/domain-error")
    def raise_domain_error() -> None:
        raise DomainError("Something odd")

    @test_app.get("/unexpected-error")
    def raise_unexpected_error() -> None:
        raise RuntimeError("Something went wrong")

    @test_app.get("/typed")
    def typed(page: int) -> dict:
        return {"page": page}

    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


# ==============================================================================
# Domain Errors
# ==============================================================================


def test_validation_error_returns_422_with_field_errors(client: TestClient) -> None:
    response = client.get("/validation-error")

    assert response.status_code == 422
    assert response.json() == {
        "detail": "Validation failed",
        "code": "VALIDATION_ERROR",
        "errors": [{"field": "page", "message": "page must be >= 1"}],
    }


def test_not_found_error_returns_404(client: TestClient) -> None:
    response = client.get("/not-found-error")

    assert response.status_code == 404
    assert response.json() == {"detail": "Results page '/bogus/' not found", "code": "NOT_FOUND"}


def test_unauthorized_error_returns_401(client: TestClient) -> None:
    response = client.get("/unauthorized-error")

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid secret", "code": "UNAUTHORIZED"}


def test_upstream_error_returns_502(client: TestClient) -> None:
    response = client.get("/upstream-error")

    assert response.status_code == 502
    assert response.json() == {"detail": "Inventory search failed", "code": "UPSTREAM_ERROR"}


def test_configuration_error_returns_500(client: TestClient) -> None:
    response = client.get("/configuration-error")

    assert response.status_code == 500
    assert response.json()["code"] == "CONFIGURATION_ERROR"


def test_unmapped_domain_error_returns_400(client: TestClient) -> None:
    response = client.get("/domain-error")

    assert response.status_code == 400
    assert response.json() == {"detail": "Something odd", "code": "DOMAIN_ERROR"}


def test_server_errors_are_logged_at_error_level(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="srp_lite.entrypoints.http.exception_handlers"):
        client.get("/upstream-error")

    record = next(record for record in caplog.records if record.getMessage() == "Domain error occurred")
    assert record.levelno == logging.ERROR
    assert record.error_code == "UPSTREAM_ERROR"
    assert record.context == {"hostname": "dealer.example.com"}


# ==============================================================================
# Request Validation and Unexpected Errors
# ==============================================================================


def test_request_validation_error_returns_structured_422(client: TestClient) -> None:
    response = client.get("/typed", params={"page": "abc"})

    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Invalid request parameters"
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "page"


def test_unexpected_error_returns_generic_500(client: TestClient) -> None:
    response = client.get("/unexpected-error")

    assert response.status_code == 500
    assert response.json() == {"detail": "An unexpected error occurred", "code": "INTERNAL_ERROR"}
