"""Unit tests for the persisted favorites set."""

from __future__ import annotations

import asyncio
import json

import pytest

from backend.services.favorites import FavoritesStore, InMemoryStorage, InvalidCountryId

KEY = "favoriteCountries"


def _store(initial: dict[str, str] | None = None) -> tuple[FavoritesStore, InMemoryStorage]:
    storage = InMemoryStorage(initial)
    return FavoritesStore(storage, key=KEY), storage


@pytest.mark.asyncio
async def test_first_read_creates_empty_array() -> None:
    store, storage = _store()

    assert await store.list_favorites() == []
    assert storage.values[KEY] == "[]"


@pytest.mark.asyncio
async def test_toggle_adds_then_removes() -> None:
    store, storage = _store()

    assert await store.toggle_favorite("BRA") is True
    assert json.loads(storage.values[KEY]) == ["BRA"]
    assert await store.is_favorite("BRA") is True

    assert await store.toggle_favorite("BRA") is False
    assert json.loads(storage.values[KEY]) == []
    assert await store.is_favorite("BRA") is False


@pytest.mark.asyncio
async def test_toggle_twice_restores_existing_membership() -> None:
    store, _ = _store({KEY: json.dumps(["FRA", "TCD"])})

    await store.toggle_favorite("FRA")
    await store.toggle_favorite("FRA")

    assert await store.is_favorite("FRA") is True
    assert set(await store.list_favorites()) == {"FRA", "TCD"}


@pytest.mark.asyncio
async def test_list_preserves_insertion_order() -> None:
    store, _ = _store()

    for country_id in ("TCD", "BRA", "FRA"):
        await store.toggle_favorite(country_id)

    assert await store.list_favorites() == ["TCD", "BRA", "FRA"]


@pytest.mark.asyncio
async def test_identifiers_are_normalized() -> None:
    store, storage = _store()

    await store.toggle_favorite(" bra ")

    assert json.loads(storage.values[KEY]) == ["BRA"]
    assert await store.is_favorite("Bra") is True
    assert await store.toggle_favorite("BRA") is False


@pytest.mark.asyncio
async def test_clear_resets_to_empty_array() -> None:
    store, storage = _store({KEY: json.dumps(["BRA", "FRA"])})

    await store.clear_favorites()

    assert storage.values[KEY] == "[]"
    assert await store.list_favorites() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["{not json", json.dumps({"BRA": True}), json.dumps([1, 2])])
async def test_malformed_value_is_treated_as_empty(raw: str) -> None:
    store, storage = _store({KEY: raw})

    assert await store.list_favorites() == []
    assert await store.toggle_favorite("BRA") is True
    assert json.loads(storage.values[KEY]) == ["BRA"]


@pytest.mark.asyncio
async def test_duplicates_in_stored_value_collapse() -> None:
    store, _ = _store({KEY: json.dumps(["BRA", "FRA", "BRA"])})

    assert await store.list_favorites() == ["BRA", "FRA"]


class SlowStorage(InMemoryStorage):
    """Storage that yields control on every call to expose interleavings."""

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        await super().set(key, value)


@pytest.mark.asyncio
async def test_concurrent_toggles_do_not_lose_updates() -> None:
    storage = SlowStorage()
    store = FavoritesStore(storage, key=KEY)

    await asyncio.gather(*(store.toggle_favorite(code) for code in ("BRA", "FRA", "TCD")))

    assert sorted(await store.list_favorites()) == ["BRA", "FRA", "TCD"]


@pytest.mark.asyncio
async def test_first_read_does_not_clobber_concurrent_toggle() -> None:
    storage = SlowStorage()
    store = FavoritesStore(storage, key=KEY)

    await asyncio.gather(store.list_favorites(), store.toggle_favorite("BRA"))

    assert await store.list_favorites() == ["BRA"]


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["", "   ", "\t\n"])
async def test_blank_identifier_is_rejected(identifier: str) -> None:
    store, storage = _store({KEY: json.dumps(["BRA"])})

    with pytest.raises(InvalidCountryId):
        await store.toggle_favorite(identifier)
    with pytest.raises(InvalidCountryId):
        await store.is_favorite(identifier)

    assert json.loads(storage.values[KEY]) == ["BRA"]


@pytest.mark.asyncio
async def test_blank_entries_in_stored_value_are_dropped() -> None:
    store, _ = _store({KEY: json.dumps(["", "fra", "  "])})

    assert await store.list_favorites() == ["FRA"]


@pytest.mark.asyncio
async def test_toggle_and_list_returns_resulting_list() -> None:
    store, _ = _store({KEY: json.dumps(["TCD"])})

    assert await store.toggle_and_list("bra") == (True, ["TCD", "BRA"])
    assert await store.toggle_and_list("TCD") == (False, ["BRA"])
