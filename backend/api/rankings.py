"""API endpoints for country rankings."""

from fastapi import APIRouter, Depends, Query

from backend.schemas.country import PopulationRankingResponse
from backend.services.country_service import DEFAULT_RANKING_SIZE, CountryService
from backend.services.dependencies import get_country_service

router = APIRouter()


@router.get("/population", response_model=PopulationRankingResponse)
async def get_population_ranking(
    limit: int = Query(
        DEFAULT_RANKING_SIZE, ge=1, le=250, description="Number of countries to rank."
    ),
    service: CountryService = Depends(get_country_service),
) -> PopulationRankingResponse:
    """Most populous countries, largest first.

    Args:
        limit: How many entries to return
        service: Country service dependency

    Returns:
        Ranked entries with display labels for the population chart
    """
    return await service.population_ranking(limit)
