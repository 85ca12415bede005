"""Tests covering runtime environment validation inside the FastAPI lifespan."""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI

import backend.main as backend_main
from backend.clients.rest_countries import CountriesClient
from backend.services.country_catalog import CountryCatalog
from backend.services.favorites import FavoritesStore
from backend.settings import AppSettings


async def _run_lifespan(app: FastAPI) -> None:
    """Execute the FastAPI lifespan context to trigger startup hooks."""

    async with backend_main.lifespan(app):
        assert isinstance(app.state.countries_client, CountriesClient)
        assert isinstance(app.state.country_catalog, CountryCatalog)
        assert isinstance(app.state.favorites_store, FavoritesStore)


def _warning_messages(caplog: pytest.LogCaptureFixture) -> list[str]:
    """Return warning-level log messages produced by ``backend.main``."""

    return [
        record.getMessage()
        for record in caplog.records
        if record.levelno >= logging.WARNING and record.name == backend_main.logger.name
    ]


@pytest.mark.asyncio
async def test_lifespan_emits_warnings_when_optional_env_missing(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Ensure missing optional configuration surfaces explicit warnings."""

    caplog.clear()
    caplog.set_level(logging.WARNING, backend_main.logger.name)

    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    monkeypatch.setattr(backend_main, "settings", AppSettings())

    await _run_lifespan(FastAPI())

    messages = _warning_messages(caplog)
    assert any(
        "Environment Configuration Warnings" in message for message in messages
    ), "Expected missing optional config warnings to be logged."


@pytest.mark.asyncio
async def test_lifespan_suppresses_warnings_when_env_complete(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Ensure configured optional environment variables avoid spurious warnings."""

    caplog.clear()
    caplog.set_level(logging.WARNING, backend_main.logger.name)

    monkeypatch.setattr(
        backend_main,
        "settings",
        AppSettings(
            database_url="sqlite+aiosqlite:///:memory:",
            cors_allow_origins_raw="https://example.com",
        ),
    )

    await _run_lifespan(FastAPI())

    messages = _warning_messages(caplog)
    assert all(
        "Environment Configuration Warnings" not in message for message in messages
    ), "Did not expect optional configuration warnings when overrides are supplied."
