"""FastAPI dependency wiring for backend services.

Long-lived collaborators (HTTP client, catalog, favorites store) are created
once in the application lifespan and parked on ``app.state``; the factories
below hand them to request handlers. Tests swap whole services through
``app.dependency_overrides`` instead of touching ``app.state``.
"""

from __future__ import annotations

from fastapi import Depends, Request

from backend.clients.rest_countries import CountriesClient
from backend.services.country_catalog import CountryCatalog
from backend.services.country_service import CountryService
from backend.services.favorites.store import FavoritesStore
from backend.services.favorites_service import FavoritesService


def get_countries_client(request: Request) -> CountriesClient:
    return request.app.state.countries_client


def get_country_catalog(request: Request) -> CountryCatalog:
    return request.app.state.country_catalog


def get_favorites_store(request: Request) -> FavoritesStore:
    return request.app.state.favorites_store


def get_country_service(
    catalog: CountryCatalog = Depends(get_country_catalog),
    client: CountriesClient = Depends(get_countries_client),
) -> CountryService:
    """Provide a :class:`CountryService` bound to the shared catalog."""

    return CountryService(catalog, client)


def get_favorites_service(
    store: FavoritesStore = Depends(get_favorites_store),
    client: CountriesClient = Depends(get_countries_client),
) -> FavoritesService:
    """Wire the shared favorites store and API client together."""

    return FavoritesService(store=store, client=client)


__all__ = [
    "get_countries_client",
    "get_country_catalog",
    "get_country_service",
    "get_favorites_service",
    "get_favorites_store",
]
