"""Schemas exchanged by the favorites endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from backend.schemas.country import Country


class FavoritesListResponse(BaseModel):
    """Identifiers currently persisted in the favorites set, insertion order."""

    country_ids: list[str] = Field(default_factory=list)
    total: int = 0


class FavoriteStatus(BaseModel):
    country_id: str
    is_favorite: bool


class FavoriteToggleResponse(FavoriteStatus):
    """Membership after a toggle plus the resulting identifier list."""

    country_ids: list[str] = Field(default_factory=list)


class FavoriteCountriesResponse(BaseModel):
    """Favorites materialized into full country records.

    ``missing`` lists identifiers whose lookup returned nothing so clients can
    tell a partially resolved set apart from an empty one.
    """

    countries: list[Country] = Field(default_factory=list)
    total: int = 0
    missing: list[str] = Field(default_factory=list)
