"""Favorites domain components split by responsibility.

``storage`` holds the key-value backends, ``store`` the persisted identifier
set built on top of them. Resolution into country records lives in
:mod:`backend.services.favorites_service`.
"""

from .storage import InMemoryStorage, KeyValueStorage, SqlKeyValueStorage
from .store import FavoritesStore, InvalidCountryId, normalize_country_id

__all__ = [
    "FavoritesStore",
    "InMemoryStorage",
    "InvalidCountryId",
    "KeyValueStorage",
    "SqlKeyValueStorage",
    "normalize_country_id",
]
