"""Business logic powering the favorites API endpoints.

Operations delegated to :class:`FavoritesStore`:
* ``list_favorites`` / ``is_favorite`` – reads of the persisted identifier set.
* ``toggle_and_list`` / ``clear_favorites`` – wholesale rewrites of the set.

Resolution into country records goes through :class:`CountriesClient`: one
``fetch_one`` per identifier, all started before any is awaited, and joined
with :func:`asyncio.gather`. A lookup that comes back empty or raises is
dropped without affecting the others.

Toggling only mutates data. Showing the favorites list afterwards is a
separate call the client makes if it wants to.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from backend.clients.rest_countries import CountriesClient
from backend.schemas.country import Country
from backend.schemas.favorites import (
    FavoriteCountriesResponse,
    FavoritesListResponse,
    FavoriteStatus,
    FavoriteToggleResponse,
)
from backend.services.favorites.store import FavoritesStore, normalize_country_id

logger = logging.getLogger(__name__)


async def resolve_favorites(
    client: CountriesClient, identifiers: Sequence[str]
) -> list[Country]:
    """Fetch every identifier concurrently; keep the ones that resolved, in order."""

    results = await asyncio.gather(
        *(client.fetch_one(identifier) for identifier in identifiers),
        return_exceptions=True,
    )

    countries: list[Country] = []
    for identifier, result in zip(identifiers, results):
        if isinstance(result, BaseException):
            logger.error("Lookup of favorite %s failed: %r", identifier, result)
            continue
        if result is not None:
            countries.append(result)
    return countries


class FavoritesService:
    """Coordinates the persisted favorites set and record resolution."""

    def __init__(self, *, store: FavoritesStore, client: CountriesClient) -> None:
        self._store = store
        self._client = client

    async def list_favorites(self) -> FavoritesListResponse:
        country_ids = await self._store.list_favorites()
        return FavoritesListResponse(country_ids=country_ids, total=len(country_ids))

    async def get_status(self, identifier: str) -> FavoriteStatus:
        return FavoriteStatus(
            country_id=normalize_country_id(identifier),
            is_favorite=await self._store.is_favorite(identifier),
        )

    async def toggle(self, identifier: str) -> FavoriteToggleResponse:
        is_favorite, country_ids = await self._store.toggle_and_list(identifier)
        return FavoriteToggleResponse(
            country_id=normalize_country_id(identifier),
            is_favorite=is_favorite,
            country_ids=country_ids,
        )

    async def clear(self) -> None:
        await self._store.clear_favorites()

    async def favorite_countries(self) -> FavoriteCountriesResponse:
        country_ids = await self._store.list_favorites()
        if not country_ids:
            return FavoriteCountriesResponse()

        countries = await resolve_favorites(self._client, country_ids)
        resolved = {country.cca3.upper() for country in countries}
        missing = [country_id for country_id in country_ids if country_id not in resolved]
        if missing:
            logger.warning("Could not resolve favorites: %s", ", ".join(missing))
        return FavoriteCountriesResponse(
            countries=countries, total=len(countries), missing=missing
        )


__all__ = ["FavoritesService", "resolve_favorites"]
