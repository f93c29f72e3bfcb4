"""Tests for global exception handlers."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sessiongate.core.errors import (
    AppError,
    AuthenticationAppError,
    ConflictAppError,
    RateLimitAppError,
    ValidationAppError,
)
from sessiongate.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ValidationAppError(code="bad_input", message="Bad input"), 400),
        (AuthenticationAppError(code="invalid_api_key", message="Invalid"), 403),
        (ConflictAppError(code="license_already_redeemed", message="Used"), 409),
        (RateLimitAppError(code="rate_limit_exceeded", message="Slow down"), 429),
    ],
)
def test_app_errors_map_to_status(
    client: TestClient, app_with_handlers: FastAPI, error: AppError, status_code: int
) -> None:
    @app_with_handlers.get("/boom")
    async def boom():
        raise error

    response = client.get("/boom")

    assert response.status_code == status_code
    data = response.json()
    assert data["error"]["code"] == error.code
    assert data["error"]["message"] == error.message
    assert "request_id" in data["error"]


def test_rate_limit_error_sets_headers(client: TestClient, app_with_handlers: FastAPI) -> None:
    @app_with_handlers.get("/throttled")
    async def throttled():
        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Slow down",
            details={"retry_after": 12},
            headers={"Retry-After": "12"},
        )

    response = client.get("/throttled")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "12"
    assert response.json()["error"]["details"] == {"retry_after": 12}


def test_unexpected_exception_returns_generic_500(
    client: TestClient, app_with_handlers: FastAPI
) -> None:
    @app_with_handlers.get("/crash")
    async def crash():
        raise RuntimeError("store backend exploded")

    response = client.get("/crash")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "internal_server_error"
    assert "exploded" not in response.text


def test_general_exception_handler_never_leaks_details() -> None:
    request = AsyncMock()
    request.url.path = "/v1/session/verify"
    request.method = "POST"

    response = asyncio.run(general_exception_handler(request, ValueError("secret detail")))

    body = json.loads(bytes(response.body).decode())
    assert response.status_code == 500
    assert "secret detail" not in json.dumps(body)
    assert "ValueError" not in json.dumps(body)


def test_setup_registers_handlers(app_with_handlers: FastAPI) -> None:
    assert AppError in app_with_handlers.exception_handlers
    assert Exception in app_with_handlers.exception_handlers
