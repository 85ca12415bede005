"""Tests asserting ``backend.main`` exception handlers delegate to helpers."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import DBAPIError
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

import backend.main as backend_main
from backend.schemas.error import ErrorResponse, ErrorType, ValidationErrorResponse
from backend.services.favorites import InvalidCountryId
from backend.utils.request_context import clear_request_id, set_request_id


def _build_request(path: str = "/resource") -> Request:
    """Create a minimal ``Request`` suitable for invoking handlers."""

    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": Headers().raw,
    }
    return Request(scope)


@pytest.mark.asyncio
async def test_validation_exception_handler_uses_builder(monkeypatch):
    """Ensure request validation handler delegates to the helper utility."""

    token = set_request_id("req-1")
    request = _build_request("/rankings/population")
    exc = RequestValidationError(
        [
            {
                "loc": ["query", "limit"],
                "msg": "Input should be less than or equal to 250",
                "input": "900",
            }
        ]
    )

    called: dict[str, object] = {}

    def fake_builder(**kwargs):
        called["kwargs"] = kwargs
        return ValidationErrorResponse(
            error_type=ErrorType.VALIDATION_ERROR,
            message="Request validation failed",
            detail="1 validation error(s)",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            timestamp=datetime(2025, 1, 1, tzinfo=UTC),
            request_id="req-1",
            path="/rankings/population",
            errors=[],
        )

    monkeypatch.setattr(backend_main, "build_validation_error_response", fake_builder)

    try:
        response = await backend_main.validation_exception_handler(request, exc)
    finally:
        clear_request_id(token)

    assert called["kwargs"]["path"] == "/rankings/population"
    assert called["kwargs"]["errors"][0].field == "query.limit"
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    json_content = json.loads(response.body.decode())
    assert json_content["message"] == "Request validation failed"


@pytest.mark.asyncio
async def test_database_connection_exception_handler_uses_builder(monkeypatch):
    """Ensure storage outages map to 503 with a retry hint."""

    token = set_request_id("req-2")
    request = _build_request("/favorites")
    exc = DBAPIError("statement", {}, Exception("boom"))

    called: dict[str, object] = {}

    def fake_builder(**kwargs):
        called["kwargs"] = kwargs
        return ErrorResponse(
            error_type=ErrorType.DATABASE_ERROR,
            message="Favorites storage unavailable",
            detail="Unable to reach the favorites storage. Please try again later.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            timestamp=datetime(2025, 1, 1, tzinfo=UTC),
            request_id="req-2",
            path="/favorites",
            retry_after=5,
        )

    monkeypatch.setattr(backend_main, "build_error_response", fake_builder)

    try:
        response = await backend_main.database_connection_exception_handler(
            request, exc
        )
    finally:
        clear_request_id(token)

    assert called["kwargs"]["retry_after"] == 5
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    json_content = json.loads(response.body.decode())
    assert json_content["message"] == "Favorites storage unavailable"


@pytest.mark.asyncio
async def test_http_exception_handler_maps_not_found() -> None:
    token = set_request_id("req-3")
    try:
        response = await backend_main.http_exception_handler(
            _build_request("/countries/XYZ"),
            StarletteHTTPException(status_code=404, detail="Country 'XYZ' not found"),
        )
    finally:
        clear_request_id(token)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    payload = json.loads(response.body.decode())
    assert payload["error_type"] == "not_found"
    assert payload["detail"] == "Country 'XYZ' not found"
    assert payload["request_id"] == "req-3"
    assert payload["path"] == "/countries/XYZ"


@pytest.mark.asyncio
async def test_generic_exception_handler_hides_details() -> None:
    response = await backend_main.generic_exception_handler(
        _build_request("/countries"), RuntimeError("secret failure")
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    payload = json.loads(response.body.decode())
    assert payload["error_type"] == "internal_error"
    assert "secret failure" not in payload["detail"]
    assert "RuntimeError" in payload["detail"]


@pytest.mark.asyncio
async def test_invalid_country_id_handler_returns_validation_payload() -> None:
    token = set_request_id("req-4")
    try:
        response = await backend_main.invalid_country_id_handler(
            _build_request("/favorites/%20/toggle"),
            InvalidCountryId("Country identifier must not be blank"),
        )
    finally:
        clear_request_id(token)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    payload = json.loads(response.body.decode())
    assert payload["error_type"] == "validation_error"
    assert payload["errors"][0]["field"] == "path.country_id"
    assert payload["errors"][0]["message"] == "Country identifier must not be blank"


def test_error_types_cover_emitted_categories() -> None:
    assert {error_type.value for error_type in ErrorType} == {
        "validation_error",
        "not_found",
        "database_error",
        "internal_error",
    }
