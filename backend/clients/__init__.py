"""Clients for the external services the backend depends on."""

from .rest_countries import (
    CountriesApiError,
    CountriesClient,
    DecodeFailure,
    NetworkFailure,
    NotFound,
)

__all__ = [
    "CountriesApiError",
    "CountriesClient",
    "DecodeFailure",
    "NetworkFailure",
    "NotFound",
]
