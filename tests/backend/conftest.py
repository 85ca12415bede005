"""Shared backend test fixtures: sample countries and an in-memory SQLite store."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from backend.db.models import Base
from backend.schemas.country import Country
from tests.backend.support.fakes import make_country


@pytest.fixture
def sample_countries() -> list[Country]:
    """Brazil, France and Chad in the order the API would return them."""
    return [
        make_country(
            "BRA",
            "Brazil",
            official="Federative Republic of Brazil",
            region="Americas",
            subregion="South America",
            population=213_000_000,
            languages={"por": "Portuguese"},
            capital=["Brasília"],
            borders=["ARG", "BOL", "COL"],
            currencies={"BRL": {"name": "Brazilian real", "symbol": "R$"}},
        ),
        make_country(
            "FRA",
            "France",
            official="French Republic",
            region="Europe",
            subregion="Western Europe",
            population=67_000_000,
            languages={"fra": "French"},
            capital=["Paris"],
            borders=["AND", "BEL", "DEU"],
        ),
        make_country(
            "TCD",
            "Chad",
            official="Republic of Chad",
            region="Africa",
            subregion="Middle Africa",
            population=17_000_000,
            languages={"ara": "Arabic", "fra": "French"},
            capital=["N'Djamena"],
        ),
    ]


@pytest_asyncio.fixture
async def session_factory() -> AsyncIterator[sessionmaker[AsyncSession]]:
    """Yield a session factory bound to a fresh in-memory SQLite database."""
    pytest.importorskip("aiosqlite")
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()
