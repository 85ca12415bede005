"""Country-facing use cases composed from the catalog, the client and the filters."""

from __future__ import annotations

import logging
import random

from backend.clients.rest_countries import CountriesClient
from backend.schemas.country import (
    CatalogRefreshResponse,
    Country,
    CountryDetail,
    CountryListResponse,
    FilterOptionsResponse,
    PopulationRankingEntry,
    PopulationRankingResponse,
    RandomCountryResponse,
    RegionCountriesResponse,
)
from backend.services.country_catalog import CountryCatalog
from backend.services.country_filters import (
    FilterCriteria,
    SortKey,
    build_view,
    filter_options,
    sort_countries,
)
from backend.services.favorites.store import normalize_country_id
from backend.utils.formatting import (
    format_area,
    format_calling_code,
    format_capital,
    format_currencies,
    format_languages,
    format_list,
    format_population,
)

logger = logging.getLogger(__name__)

DEFAULT_RANKING_SIZE = 10


def build_country_detail(country: Country) -> CountryDetail:
    return CountryDetail(
        country=country,
        population_label=format_population(country.population),
        languages_label=format_languages(country.languages),
        currencies_label=format_currencies(country.currencies),
        capital_label=format_capital(country.capital),
        area_label=format_area(country.area),
        timezones_label=format_list(country.timezones),
        tld_label=format_list(country.tld),
        calling_code_label=format_calling_code(country.idd),
        alt_spellings_label=format_list(country.alt_spellings),
        car_signs_label=format_list(country.car.signs if country.car else None),
        calling_codes=country.calling_codes,
    )


def country_facts(country: Country) -> list[str]:
    """Return the trivia sentences shown on the random-country card."""

    name = country.name.common
    region = country.region
    if country.subregion:
        region = f"{region}, {country.subregion}"

    facts = [
        f"{name} tem uma população de {format_population(country.population)} habitantes.",
        f"A capital de {name} é {country.capital[0] if country.capital else 'não definida'}.",
        f"{name} está localizado na região de {region}.",
    ]
    if country.languages:
        facts.append(f"Em {name}, fala-se {format_languages(country.languages)}.")
    if country.borders:
        facts.append(f"{name} faz fronteira com {len(country.borders)} países.")
    else:
        facts.append(f"{name} não faz fronteira com nenhum país.")
    return facts


class CountryService:
    def __init__(
        self,
        catalog: CountryCatalog,
        client: CountriesClient,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog
        self._client = client
        self._rng = rng or random.Random()

    async def list_countries(self, criteria: FilterCriteria) -> CountryListResponse:
        """Return the view selected by ``criteria`` over the full collection."""

        collection = await self._catalog.get()
        view = build_view(collection, criteria)
        logger.debug(
            "Computed %s view with %d of %d countries for %s",
            view.state.value,
            len(view.countries),
            len(collection),
            criteria.to_query_params(),
        )
        return CountryListResponse(
            countries=view.countries,
            total=len(view.countries),
            state=view.state,
            query=criteria.to_query_params(),
        )

    async def get_country(self, identifier: str) -> CountryDetail | None:
        country = await self._client.fetch_one(normalize_country_id(identifier))
        if country is None:
            return None
        return build_country_detail(country)

    async def countries_by_region(self, region: str) -> RegionCountriesResponse:
        countries = await self._client.fetch_by_region(region)
        return RegionCountriesResponse(
            region=region, countries=countries, total=len(countries)
        )

    async def filter_options(self) -> FilterOptionsResponse:
        regions, languages = filter_options(await self._catalog.get())
        return FilterOptionsResponse(regions=regions, languages=languages)

    async def population_ranking(
        self, limit: int = DEFAULT_RANKING_SIZE
    ) -> PopulationRankingResponse:
        """Most populous countries first, as plotted by the ranking chart."""

        ranked = sort_countries(await self._catalog.get(), SortKey.POPULATION_DESC)
        entries = [
            PopulationRankingEntry(
                rank=index,
                cca3=country.cca3,
                name=country.name.common,
                population=country.population,
                population_label=format_population(country.population),
                flag_url=country.flag_url,
            )
            for index, country in enumerate(ranked[:limit], start=1)
        ]
        return PopulationRankingResponse(entries=entries)

    async def random_country(self) -> RandomCountryResponse | None:
        collection = await self._catalog.get()
        if not collection:
            return None
        country = self._rng.choice(collection)
        fact = self._rng.choice(country_facts(country))
        return RandomCountryResponse(country=country, fact=fact)

    async def refresh(self) -> CatalogRefreshResponse:
        countries = await self._catalog.reload()
        return CatalogRefreshResponse(
            message="Refresh successful" if countries else "Refresh failed",
            total_countries=len(countries),
        )


__all__ = [
    "CountryService",
    "DEFAULT_RANKING_SIZE",
    "build_country_detail",
    "country_facts",
]
