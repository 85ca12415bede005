"""Persisted set of favorite country identifiers."""

from __future__ import annotations

import asyncio
import json
import logging

from backend.services.favorites.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class InvalidCountryId(ValueError):
    """Raised for identifiers that are blank once whitespace is stripped."""


def normalize_country_id(identifier: str) -> str:
    """Return the canonical upper-case form of a three-letter code."""

    country_id = identifier.strip().upper()
    if not country_id:
        raise InvalidCountryId("Country identifier must not be blank")
    return country_id


class FavoritesStore:
    """Ordered, duplicate-free list of identifiers kept under one storage key.

    Every operation reads (and, for mutations, rewrites) the whole JSON array.
    Mutations hold an ``asyncio.Lock`` so concurrent toggles inside one process
    cannot interleave their read-modify-write cycles. Writers in other
    processes are not coordinated; the last write wins.
    """

    def __init__(self, storage: KeyValueStorage, *, key: str) -> None:
        self._storage = storage
        self._key = key
        self._lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    async def list_favorites(self) -> list[str]:
        raw = await self._storage.get(self._key)
        if raw is not None:
            return self._decode(raw)

        # First read: persist the empty set unless a toggle got there first.
        async with self._lock:
            favorites = await self._read()
            if favorites is None:
                await self._write([])
                return []
            return favorites

    async def is_favorite(self, identifier: str) -> bool:
        return normalize_country_id(identifier) in await self.list_favorites()

    async def toggle_favorite(self, identifier: str) -> bool:
        """Add ``identifier`` when absent, remove it when present.

        Returns the membership after the toggle.
        """

        is_favorite, _ = await self.toggle_and_list(identifier)
        return is_favorite

    async def toggle_and_list(self, identifier: str) -> tuple[bool, list[str]]:
        """Toggle ``identifier`` and return the membership with the list it produced."""

        country_id = normalize_country_id(identifier)
        async with self._lock:
            favorites = await self._read() or []
            if country_id in favorites:
                favorites.remove(country_id)
                is_favorite = False
            else:
                favorites.append(country_id)
                is_favorite = True
            await self._write(favorites)

        logger.info(
            "Favorite %s %s (%d stored)",
            country_id,
            "added" if is_favorite else "removed",
            len(favorites),
        )
        return is_favorite, list(favorites)

    async def clear_favorites(self) -> None:
        async with self._lock:
            await self._write([])
        logger.info("Favorites cleared")

    async def _read(self) -> list[str] | None:
        raw = await self._storage.get(self._key)
        return None if raw is None else self._decode(raw)

    async def _write(self, favorites: list[str]) -> None:
        await self._storage.set(self._key, json.dumps(favorites))

    def _decode(self, raw: str) -> list[str]:
        try:
            decoded = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed favorites value under %r", self._key)
            return []

        if not isinstance(decoded, list) or not all(
            isinstance(item, str) for item in decoded
        ):
            logger.warning("Ignoring non-array favorites value under %r", self._key)
            return []

        # dict.fromkeys drops duplicates while keeping insertion order
        return list(
            dict.fromkeys(
                normalize_country_id(item) for item in decoded if item.strip()
            )
        )


__all__ = ["FavoritesStore", "InvalidCountryId", "normalize_country_id"]
