"""Async client for the public REST Countries API.

Every public method issues exactly one HTTP request and never raises: network
errors, undecodable payloads and unknown identifiers are logged and converted
into an empty list or ``None``. The exception hierarchy below only travels
between the private request helper and the public methods.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from backend.schemas.country import Country

logger = logging.getLogger(__name__)

# Lookups answered with these statuses mean "no such country" rather than an outage.
_NOT_FOUND_STATUSES = frozenset({400, 404})


class CountriesApiError(Exception):
    """Base class for failures talking to the countries API."""


class NetworkFailure(CountriesApiError):
    """The request could not be completed or returned a non-success status."""


class DecodeFailure(CountriesApiError):
    """The response body does not have the expected shape."""


class NotFound(CountriesApiError):
    """The requested identifier or region has no match."""


class CountriesClient:
    """Thin wrapper around ``httpx.AsyncClient`` speaking the v3.1 endpoints."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: str,
        all_fields: str | None = None,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._all_fields = all_fields or None

    async def fetch_all(self) -> list[Country]:
        """Return every country, or ``[]`` when anything goes wrong."""

        params = {"fields": self._all_fields} if self._all_fields else None
        try:
            payload = await self._get_json("/all", params=params)
            return self._decode_many(payload)
        except CountriesApiError as exc:
            logger.error("Error fetching countries: %s", exc)
            return []

    async def fetch_one(self, identifier: str) -> Country | None:
        """Return the country whose three-letter code is ``identifier``."""

        path = f"/alpha/{quote(identifier.strip(), safe='')}"
        try:
            payload = await self._get_json(path)
            return self._decode_first(payload, identifier)
        except CountriesApiError as exc:
            logger.error("Error fetching country with ID %s: %s", identifier, exc)
            return None

    async def fetch_by_region(self, region: str) -> list[Country]:
        """Return every country whose region equals ``region``."""

        path = f"/region/{quote(region.strip(), safe='')}"
        try:
            payload = await self._get_json(path)
            return self._decode_many(payload)
        except CountriesApiError as exc:
            logger.error("Error fetching countries in region %s: %s", region, exc)
            return []

    async def _get_json(
        self, path: str, *, params: Mapping[str, str] | None = None
    ) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = await self._http.get(url, params=params)
        except httpx.HTTPError as exc:
            raise NetworkFailure(f"GET {url} failed: {exc!r}") from exc

        if response.status_code in _NOT_FOUND_STATUSES:
            raise NotFound(f"GET {url} returned {response.status_code}")
        if not response.is_success:
            raise NetworkFailure(f"GET {url} returned {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeFailure(f"GET {url} returned a non-JSON body") from exc

    @staticmethod
    def _decode_many(payload: Any) -> list[Country]:
        if not isinstance(payload, list):
            raise DecodeFailure(
                f"expected a JSON array of countries, got {type(payload).__name__}"
            )

        countries: list[Country] = []
        skipped = 0
        for item in payload:
            try:
                countries.append(Country.model_validate(item))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.warning("Skipped %d undecodable country records", skipped)
        return countries

    @staticmethod
    def _decode_first(payload: Any, identifier: str) -> Country:
        # ``/alpha/{code}`` answers with an array; only the first element matters.
        if isinstance(payload, list):
            if not payload:
                raise NotFound(f"no country matches {identifier!r}")
            payload = payload[0]
        if not isinstance(payload, dict):
            raise DecodeFailure(
                f"expected a country object, got {type(payload).__name__}"
            )
        try:
            return Country.model_validate(payload)
        except ValidationError as exc:
            raise DecodeFailure(f"country {identifier!r} could not be decoded") from exc


__all__ = [
    "CountriesApiError",
    "CountriesClient",
    "DecodeFailure",
    "NetworkFailure",
    "NotFound",
]
