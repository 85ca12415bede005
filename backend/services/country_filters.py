"""Filtering and ordering of an in-memory country collection.

``compute_view`` is a pure function of the full collection and a
:class:`FilterCriteria` value: each call re-filters and re-sorts from scratch,
so the displayed subset can always be recomputed from those two inputs alone.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

from backend.schemas.country import Country, ViewState

ALL_SENTINEL = "all"


class SortKey(str, Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    POPULATION_ASC = "population-asc"
    POPULATION_DESC = "population-desc"

    @classmethod
    def parse(cls, value: str | None) -> SortKey | None:
        """Return the matching key, or ``None`` for blank and unknown values."""

        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class FilterCriteria(BaseModel):
    """Search text, region, language and sort order of the current view."""

    model_config = ConfigDict(frozen=True)

    search: str | None = None
    region: str | None = None
    language: str | None = None
    sort: SortKey | None = None

    @classmethod
    def from_query_params(cls, params: Mapping[str, str | None]) -> FilterCriteria:
        """Build criteria from ``search``/``region``/``language``/``sort`` params.

        Missing and empty parameters mean "no constraint"; an unrecognised sort
        value (such as the ``default`` option of the sort selector) leaves the
        collection order untouched.
        """

        return cls(
            search=params.get("search") or None,
            region=params.get("region") or None,
            language=params.get("language") or None,
            sort=SortKey.parse(params.get("sort")),
        )

    def to_query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.search:
            params["search"] = self.search
        if self.region:
            params["region"] = self.region
        if self.language:
            params["language"] = self.language
        if self.sort is not None:
            params["sort"] = self.sort.value
        return params

    @property
    def is_unconstrained(self) -> bool:
        return not self.to_query_params()


@dataclass(frozen=True)
class CountryView:
    countries: list[Country]
    state: ViewState


def collation_key(name: str) -> tuple[str, str]:
    """Locale-style sort key: accents and case only break ties.

    ``Åland Islands`` sorts next to ``Albania`` instead of after ``Zimbabwe``.
    """

    decomposed = unicodedata.normalize("NFD", name)
    base = "".join(char for char in decomposed if unicodedata.category(char) != "Mn")
    return base.casefold(), name


def _matches_search(country: Country, fragment: str) -> bool:
    needle = fragment.lower()
    return (
        needle in country.name.common.lower()
        or needle in country.name.official.lower()
    )


def _matches_language(country: Country, fragment: str) -> bool:
    if not country.languages:
        return False
    needle = fragment.lower()
    return any(needle in language.lower() for language in country.languages.values())


def _is_active(value: str | None) -> bool:
    return bool(value) and value != ALL_SENTINEL


def filter_countries(
    collection: Iterable[Country], criteria: FilterCriteria
) -> list[Country]:
    filtered = list(collection)

    if criteria.search:
        filtered = [c for c in filtered if _matches_search(c, criteria.search)]

    if _is_active(criteria.region):
        filtered = [c for c in filtered if c.region == criteria.region]

    if _is_active(criteria.language):
        filtered = [c for c in filtered if _matches_language(c, criteria.language)]

    return filtered


def sort_countries(countries: Sequence[Country], sort: SortKey | None) -> list[Country]:
    # ``sorted`` is stable with ``reverse=True`` too, so ties keep input order.
    if sort is None:
        return list(countries)
    if sort is SortKey.POPULATION_ASC:
        return sorted(countries, key=lambda c: c.population)
    if sort is SortKey.POPULATION_DESC:
        return sorted(countries, key=lambda c: c.population, reverse=True)
    if sort is SortKey.NAME_ASC:
        return sorted(countries, key=lambda c: collation_key(c.name.common))
    return sorted(countries, key=lambda c: collation_key(c.name.common), reverse=True)


def compute_view(
    collection: Sequence[Country], criteria: FilterCriteria
) -> list[Country]:
    """Return the records of ``collection`` selected and ordered by ``criteria``."""

    return sort_countries(filter_countries(collection, criteria), criteria.sort)


def build_view(collection: Sequence[Country], criteria: FilterCriteria) -> CountryView:
    """Wrap :func:`compute_view` with the empty / no-results distinction."""

    if not collection:
        return CountryView(countries=[], state=ViewState.EMPTY)
    countries = compute_view(collection, criteria)
    state = ViewState.READY if countries else ViewState.NO_RESULTS
    return CountryView(countries=countries, state=state)


def filter_options(collection: Iterable[Country]) -> tuple[list[str], list[str]]:
    """Return the sorted distinct regions and languages of ``collection``."""

    regions: set[str] = set()
    languages: set[str] = set()
    for country in collection:
        if country.region:
            regions.add(country.region)
        if country.languages:
            languages.update(country.languages.values())
    return sorted(regions, key=collation_key), sorted(languages, key=collation_key)


__all__ = [
    "ALL_SENTINEL",
    "CountryView",
    "FilterCriteria",
    "SortKey",
    "build_view",
    "collation_key",
    "compute_view",
    "filter_countries",
    "filter_options",
    "sort_countries",
]
