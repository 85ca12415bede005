"""Display helpers producing the pt-BR labels shown next to country data."""

from __future__ import annotations

from collections.abc import Mapping

from backend.schemas.country import CallingCode, Currency

NOT_AVAILABLE = "N/A"


def format_population(population: int) -> str:
    if population >= 1_000_000_000:
        return f"{population / 1_000_000_000:.1f} bilhões"
    if population >= 1_000_000:
        return f"{population / 1_000_000:.1f} milhões"
    if population >= 1_000:
        return f"{population / 1_000:.1f} mil"
    return str(population)


def join_labels(labels: list[str]) -> str:
    """Join ``labels`` as ``"a, b e c"``; ``"N/A"`` for an empty list."""

    if not labels:
        return NOT_AVAILABLE
    if len(labels) == 1:
        return labels[0]
    return f"{', '.join(labels[:-1])} e {labels[-1]}"


def format_languages(languages: Mapping[str, str] | None) -> str:
    if not languages:
        return NOT_AVAILABLE
    return join_labels(list(languages.values()))


def format_currencies(currencies: Mapping[str, Currency] | None) -> str:
    if not currencies:
        return NOT_AVAILABLE
    return join_labels(
        [f"{currency.name} ({currency.symbol or ''})" for currency in currencies.values()]
    )


def format_capital(capital: list[str]) -> str:
    return capital[0] if capital else NOT_AVAILABLE


def format_area(area: float | None) -> str:
    """Return ``area`` with thousands separators, e.g. ``"8,515,767 km²"``."""

    if area is None:
        return NOT_AVAILABLE
    value = int(area) if float(area).is_integer() else area
    return f"{value:,} km²"


def format_list(values: list[str] | None) -> str:
    """Comma-join timezones, TLDs, spellings and the like."""

    if not values:
        return NOT_AVAILABLE
    return ", ".join(values)


def format_calling_code(idd: CallingCode | None) -> str:
    # Countries with many suffixes (e.g. +1) show only the first one.
    if idd is None or not idd.root:
        return NOT_AVAILABLE
    if not idd.suffixes:
        return idd.root
    return f"{idd.root}{idd.suffixes[0]}"


__all__ = [
    "NOT_AVAILABLE",
    "format_area",
    "format_calling_code",
    "format_capital",
    "format_list",
    "format_currencies",
    "format_languages",
    "format_population",
    "join_labels",
]
