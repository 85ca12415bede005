"""Pytest configuration helpers for the Country Atlas project.

Keeps the repository importable and points the settings at a throwaway SQLite
file so importing :mod:`backend.main` never touches the developer database.
"""

from __future__ import annotations

import os

import pytest

from tests import _ensure_repo_on_path


def pytest_configure(config: pytest.Config) -> None:
    """Hook executed by pytest prior to running any tests."""

    _ensure_repo_on_path()
    os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    os.environ.setdefault("COUNTRIES_API_BASE_URL", "https://countries.test/v3.1")
