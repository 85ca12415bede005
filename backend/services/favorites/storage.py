"""Key-value storage backends the favorites store can be wired to.

Values are opaque strings read and written wholesale, one per key, mirroring
a browser's local storage.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from backend.db.models import StorageEntry


class KeyValueStorage(Protocol):
    async def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None``."""

    async def set(self, key: str, value: str) -> None:
        """Replace the value stored under ``key``."""


class InMemoryStorage:
    """Process-local storage used by tests and ephemeral CLI sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value


class SqlKeyValueStorage:
    """Storage backed by the ``storage_entries`` table.

    Each call opens its own session and commits before returning so the value
    is durable as soon as ``set`` completes.
    """

    def __init__(self, session_factory: sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(StorageEntry.value).where(StorageEntry.key == key)
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            try:
                entry = await session.get(StorageEntry, key)
                if entry is None:
                    session.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
                await session.commit()
            except Exception:
                await session.rollback()
                raise


__all__ = ["InMemoryStorage", "KeyValueStorage", "SqlKeyValueStorage"]
