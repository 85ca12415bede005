from fastapi import APIRouter, Depends

from backend.schemas.country import RegionCountriesResponse
from backend.services.country_service import CountryService
from backend.services.dependencies import get_country_service

router = APIRouter()


@router.get("/{region}", response_model=RegionCountriesResponse)
async def get_region_countries(
    region: str,
    service: CountryService = Depends(get_country_service),
) -> RegionCountriesResponse:
    """Countries of ``region`` straight from the API (empty when unknown)."""

    return await service.countries_by_region(region)
