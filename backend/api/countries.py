"""Country listing, detail and discovery endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.schemas.country import (
    CatalogRefreshResponse,
    CountryDetail,
    CountryListResponse,
    FilterOptionsResponse,
    RandomCountryResponse,
)
from backend.services.country_filters import FilterCriteria
from backend.services.country_service import CountryService
from backend.services.dependencies import get_country_service

router = APIRouter()


@router.get("", response_model=CountryListResponse)
@router.get("/", response_model=CountryListResponse, include_in_schema=False)
async def list_countries(
    search: str | None = Query(
        None, description="Case-insensitive fragment of the common or official name."
    ),
    region: str | None = Query(
        None, description="Exact region name; 'all' disables the constraint."
    ),
    language: str | None = Query(
        None, description="Fragment of a spoken language; 'all' disables the constraint."
    ),
    sort: str | None = Query(
        None,
        description=(
            "One of 'name-asc', 'name-desc', 'population-asc', 'population-desc'."
            " Any other value keeps the API order."
        ),
    ),
    service: CountryService = Depends(get_country_service),
) -> CountryListResponse:
    """Filter and sort the full collection.

    Examples:
        /countries?search=fra
        /countries?region=Europe&sort=population-desc
        /countries?language=portuguese&sort=name-asc
    """

    criteria = FilterCriteria.from_query_params(
        {"search": search, "region": region, "language": language, "sort": sort}
    )
    return await service.list_countries(criteria)


@router.get("/options", response_model=FilterOptionsResponse)
async def get_filter_options(
    service: CountryService = Depends(get_country_service),
) -> FilterOptionsResponse:
    """Distinct regions and languages for the filter selectors."""

    return await service.filter_options()


@router.get("/random", response_model=RandomCountryResponse)
async def get_random_country(
    service: CountryService = Depends(get_country_service),
) -> RandomCountryResponse:
    random_country = await service.random_country()
    if random_country is None:
        raise HTTPException(status_code=404, detail="No countries available")
    return random_country


@router.post("/refresh", response_model=CatalogRefreshResponse)
async def refresh_catalog(
    service: CountryService = Depends(get_country_service),
) -> CatalogRefreshResponse:
    """Drop the in-memory collection and fetch it again."""

    return await service.refresh()


@router.get("/{country_id}", response_model=CountryDetail)
async def get_country(
    country_id: str,
    service: CountryService = Depends(get_country_service),
) -> CountryDetail:
    detail = await service.get_country(country_id)
    if detail is None:
        raise HTTPException(status_code=404, detail=f"Country '{country_id}' not found")
    return detail
