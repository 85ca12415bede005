"""FastAPI router exposing the persisted favorites set."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from backend.schemas.favorites import (
    FavoriteCountriesResponse,
    FavoritesListResponse,
    FavoriteStatus,
    FavoriteToggleResponse,
)
from backend.services.dependencies import get_favorites_service
from backend.services.favorites_service import FavoritesService

router = APIRouter()


@router.get("", response_model=FavoritesListResponse)
async def list_favorites(
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoritesListResponse:
    """Return the stored identifiers in insertion order."""

    return await service.list_favorites()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_favorites(
    service: FavoritesService = Depends(get_favorites_service),
) -> Response:
    """Reset the favorites set to empty."""

    await service.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/countries", response_model=FavoriteCountriesResponse)
async def list_favorite_countries(
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteCountriesResponse:
    """Resolve every favorite into a country record, skipping failed lookups."""

    return await service.favorite_countries()


@router.get("/{country_id}", response_model=FavoriteStatus)
async def get_favorite_status(
    country_id: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteStatus:
    return await service.get_status(country_id)


@router.post("/{country_id}/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    country_id: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteToggleResponse:
    """Add or remove ``country_id`` and report the new membership."""

    return await service.toggle(country_id)
