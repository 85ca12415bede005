"""Pydantic schemas for API responses."""

from backend.schemas.country import (  # noqa: F401
    Country,
    CountryDetail,
    CountryListResponse,
    FilterOptionsResponse,
    PopulationRankingEntry,
    PopulationRankingResponse,
    RandomCountryResponse,
    RegionCountriesResponse,
    ViewState,
)
from backend.schemas.favorites import (  # noqa: F401
    FavoriteCountriesResponse,
    FavoritesListResponse,
    FavoriteStatus,
    FavoriteToggleResponse,
)
