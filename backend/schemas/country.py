"""Pydantic models describing country records and the responses built from them.

Field names follow Python conventions while aliases keep the camelCase keys
used by the REST Countries payloads, so records can be validated straight from
the API response and serialized back with ``by_alias=True`` when needed.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class NativeName(_Record):
    official: str = ""
    common: str = ""


class CountryName(_Record):
    common: str
    official: str = ""
    native_name: dict[str, NativeName] | None = Field(default=None, alias="nativeName")


class Currency(_Record):
    name: str = ""
    symbol: str | None = None


class Flags(_Record):
    png: str | None = None
    svg: str | None = None
    alt: str | None = None


class CallingCode(_Record):
    root: str | None = None
    suffixes: list[str] = Field(default_factory=list)


class Maps(_Record):
    google_maps: str | None = Field(default=None, alias="googleMaps")
    open_street_maps: str | None = Field(default=None, alias="openStreetMaps")


class CoatOfArms(_Record):
    png: str | None = None
    svg: str | None = None


class Car(_Record):
    signs: list[str] = Field(default_factory=list)
    side: str | None = None


class PostalCode(_Record):
    format: str | None = None
    regex: str | None = None


class Country(_Record):
    """A single country as returned by the REST Countries API."""

    cca3: str
    name: CountryName
    region: str = ""
    subregion: str | None = None
    population: int = Field(default=0, ge=0)
    languages: dict[str, str] | None = None
    currencies: dict[str, Currency] | None = None
    borders: list[str] = Field(default_factory=list)
    flags: Flags = Field(default_factory=Flags)
    latlng: list[float] = Field(default_factory=list)
    capital: list[str] = Field(default_factory=list)
    area: float | None = None
    timezones: list[str] = Field(default_factory=list)
    continents: list[str] = Field(default_factory=list)
    idd: CallingCode | None = None
    tld: list[str] = Field(default_factory=list)
    maps: Maps | None = None
    flag: str | None = None
    # Only present on single-country lookups; ``/all`` is field-limited.
    alt_spellings: list[str] = Field(default_factory=list, alias="altSpellings")
    status: str | None = None
    independent: bool | None = None
    un_member: bool | None = Field(default=None, alias="unMember")
    landlocked: bool | None = None
    coat_of_arms: CoatOfArms | None = Field(default=None, alias="coatOfArms")
    gini: dict[str, float] | None = None
    fifa: str | None = None
    start_of_week: str | None = Field(default=None, alias="startOfWeek")
    car: Car | None = None
    postal_code: PostalCode | None = Field(default=None, alias="postalCode")

    @property
    def flag_url(self) -> str | None:
        return self.flags.svg or self.flags.png

    @property
    def coat_of_arms_url(self) -> str | None:
        if self.coat_of_arms is None:
            return None
        return self.coat_of_arms.svg or self.coat_of_arms.png

    @property
    def calling_codes(self) -> list[str]:
        """Expand ``idd`` into full dialling prefixes such as ``+55``."""

        if self.idd is None or not self.idd.root:
            return []
        if not self.idd.suffixes:
            return [self.idd.root]
        return [f"{self.idd.root}{suffix}" for suffix in self.idd.suffixes]


class ViewState(str, Enum):
    """Outcome of a listing computation."""

    READY = "ready"
    EMPTY = "empty"
    NO_RESULTS = "no_results"


class CountryListResponse(BaseModel):
    countries: list[Country]
    total: int
    state: ViewState
    query: dict[str, str] = Field(
        default_factory=dict,
        description="Criteria echoed back as query parameters.",
    )


class CountryDetail(BaseModel):
    country: Country
    population_label: str
    languages_label: str
    currencies_label: str
    capital_label: str
    area_label: str
    timezones_label: str
    tld_label: str
    calling_code_label: str
    alt_spellings_label: str
    car_signs_label: str
    calling_codes: list[str] = Field(default_factory=list)


class RegionCountriesResponse(BaseModel):
    region: str
    countries: list[Country]
    total: int


class FilterOptionsResponse(BaseModel):
    regions: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)


class PopulationRankingEntry(BaseModel):
    rank: int
    cca3: str
    name: str
    population: int
    population_label: str
    flag_url: str | None = None


class PopulationRankingResponse(BaseModel):
    entries: list[PopulationRankingEntry]


class RandomCountryResponse(BaseModel):
    country: Country
    fact: str


class CatalogRefreshResponse(BaseModel):
    message: str
    total_countries: int
