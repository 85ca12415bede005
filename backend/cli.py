"""
Command-line access to the country catalog and the favorites set.

Usage:
    country-atlas countries list --search fra --sort population-desc
    country-atlas countries show BRA
    country-atlas countries ranking --limit 5
    country-atlas favorites toggle BRA
    country-atlas favorites list
    country-atlas favorites show
    country-atlas favorites clear
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TypeVar

import click
import httpx

from backend.clients.rest_countries import CountriesClient
from backend.db.connection import dispose_engine, get_session_factory, init_models
from backend.services.country_catalog import CountryCatalog
from backend.services.country_filters import FilterCriteria, SortKey
from backend.services.country_service import DEFAULT_RANKING_SIZE, CountryService
from backend.services.favorites import (
    FavoritesStore,
    InvalidCountryId,
    SqlKeyValueStorage,
    normalize_country_id,
)
from backend.services.favorites_service import FavoritesService
from backend.settings import get_settings

T = TypeVar("T")


@dataclass
class Runtime:
    client: CountriesClient
    store: FavoritesStore

    @property
    def countries(self) -> CountryService:
        return CountryService(CountryCatalog(self.client), self.client)

    @property
    def favorites(self) -> FavoritesService:
        return FavoritesService(store=self.store, client=self.client)


@asynccontextmanager
async def open_runtime() -> AsyncIterator[Runtime]:
    """Open the HTTP client and the SQL-backed favorites store for one command."""

    settings = get_settings()
    await init_models()
    try:
        async with httpx.AsyncClient() as http_client:
            client = CountriesClient(
                http_client,
                base_url=settings.resolved_countries_api_base_url,
                all_fields=settings.countries_api_fields,
            )
            store = FavoritesStore(
                SqlKeyValueStorage(get_session_factory()),
                key=settings.favorites_storage_key,
            )
            yield Runtime(client=client, store=store)
    finally:
        await dispose_engine()


def _run(action: Callable[[Runtime], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with open_runtime() as runtime:
            return await action(runtime)

    return asyncio.run(runner())


def _country_id(ctx: click.Context, param: click.Parameter, value: str) -> str:
    try:
        return normalize_country_id(value)
    except InvalidCountryId as exc:
        raise click.BadParameter(str(exc)) from exc


def _format_row(cca3: str, name: str, population: int) -> str:
    return f"{cca3:<4} {name:<40} {population:>14,}"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
def main(verbose: bool) -> None:
    """Browse countries and manage favorites from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_settings().log_level_numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.group()
def countries() -> None:
    """Query the country catalog."""


@countries.command("list")
@click.option("--search", default=None, help="Fragment of the common or official name.")
@click.option("--region", default=None, help="Exact region name.")
@click.option("--language", default=None, help="Fragment of a spoken language.")
@click.option(
    "--sort",
    type=click.Choice([key.value for key in SortKey]),
    default=None,
    help="Ordering of the results.",
)
def list_countries(
    search: str | None, region: str | None, language: str | None, sort: str | None
) -> None:
    """Print the countries matching the given filters."""
    criteria = FilterCriteria.from_query_params(
        {"search": search, "region": region, "language": language, "sort": sort}
    )
    response = _run(lambda runtime: runtime.countries.list_countries(criteria))

    if not response.countries:
        click.echo(f"No countries ({response.state.value})")
        return
    for country in response.countries:
        click.echo(_format_row(country.cca3, country.name.common, country.population))
    click.echo(f"\n{response.total} countries")


@countries.command("show")
@click.argument("country_id", callback=_country_id)
def show_country(country_id: str) -> None:
    """Print the details of one country."""
    detail = _run(lambda runtime: runtime.countries.get_country(country_id))
    if detail is None:
        raise click.ClickException(f"Country '{country_id}' not found")

    country = detail.country
    click.echo(f"{country.name.common} ({country.cca3})")
    click.echo(f"  Official name: {country.name.official}")
    click.echo(f"  Capital:       {detail.capital_label}")
    region = country.region
    if country.subregion:
        region = f"{region} ({country.subregion})"
    click.echo(f"  Region:        {region}")
    click.echo(f"  Population:    {detail.population_label}")
    click.echo(f"  Languages:     {detail.languages_label}")
    click.echo(f"  Currencies:    {detail.currencies_label}")
    click.echo(f"  Area:          {detail.area_label}")
    click.echo(f"  Calling code:  {detail.calling_code_label}")
    click.echo(f"  Timezones:     {detail.timezones_label}")
    click.echo(f"  Domains:       {detail.tld_label}")
    if country.borders:
        click.echo(f"  Borders:       {', '.join(country.borders)}")


@countries.command("ranking")
@click.option("--limit", type=click.IntRange(1, 250), default=DEFAULT_RANKING_SIZE)
def population_ranking(limit: int) -> None:
    """Print the most populous countries."""
    ranking = _run(lambda runtime: runtime.countries.population_ranking(limit))
    for entry in ranking.entries:
        click.echo(f"{entry.rank:>3}. {entry.name:<40} {entry.population_label}")


@main.group()
def favorites() -> None:
    """Manage the favorites set."""


@favorites.command("list")
def list_favorites() -> None:
    """Print the stored identifiers."""
    response = _run(lambda runtime: runtime.favorites.list_favorites())
    if not response.country_ids:
        click.echo("No favorites yet")
        return
    for country_id in response.country_ids:
        click.echo(country_id)


@favorites.command("toggle")
@click.argument("country_id", callback=_country_id)
def toggle_favorite(country_id: str) -> None:
    """Add COUNTRY_ID to the favorites, or remove it if already present."""
    response = _run(lambda runtime: runtime.favorites.toggle(country_id))
    verb = "added to" if response.is_favorite else "removed from"
    click.echo(f"{response.country_id} {verb} favorites")


@favorites.command("clear")
@click.confirmation_option(prompt="Remove every favorite?")
def clear_favorites() -> None:
    """Remove every favorite."""
    _run(lambda runtime: runtime.favorites.clear())
    click.echo("Favorites cleared")


@favorites.command("show")
def show_favorites() -> None:
    """Resolve the favorites into country records."""
    response = _run(lambda runtime: runtime.favorites.favorite_countries())
    for country in response.countries:
        click.echo(_format_row(country.cca3, country.name.common, country.population))
    if response.missing:
        click.echo(f"Unresolved: {', '.join(response.missing)}", err=True)
    if not response.countries and not response.missing:
        click.echo("No favorites yet")


if __name__ == "__main__":
    main()
