"""In-memory holder of the full country collection."""

from __future__ import annotations

import asyncio
import logging

from backend.clients.rest_countries import CountriesClient
from backend.schemas.country import Country

logger = logging.getLogger(__name__)


class CountryCatalog:
    """Load the full collection once and hand the same list to every view.

    A load that yields nothing (the client already logged why) is not kept,
    so the next caller triggers another fetch instead of serving an empty
    catalog for the lifetime of the process.
    """

    def __init__(self, client: CountriesClient) -> None:
        self._client = client
        self._countries: list[Country] | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._countries is not None

    async def get(self) -> list[Country]:
        if self._countries is not None:
            return self._countries

        async with self._lock:
            if self._countries is None:
                await self._load()
            return self._countries or []

    async def reload(self) -> list[Country]:
        async with self._lock:
            self._countries = None
            await self._load()
            return self._countries or []

    async def _load(self) -> None:
        countries = await self._client.fetch_all()
        if not countries:
            logger.warning("Country catalog is empty; it will be fetched again on next use")
            return
        self._countries = countries
        logger.info("Loaded %d countries into the catalog", len(countries))


__all__ = ["CountryCatalog"]
