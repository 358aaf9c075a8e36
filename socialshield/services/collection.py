"""
collection.py — Shared load/save behaviour for the persisted session stores.

A PersistedCollection holds an ordered list of pydantic records in memory
and mirrors the whole list to one storage key as a JSON array. Writes are
full overwrites, serialised through an asyncio.Lock so a slower write can
never land after a newer one.
"""

import asyncio
import logging
from typing import Callable, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

SAVE_FAILED_MESSAGE = "Could not save your changes. Please try again."


class PersistenceError(Exception):
    """A storage write failed. str(exc) is safe to show users."""


class PersistedCollection(Generic[T]):
    def __init__(self, storage, key: str, adapter: TypeAdapter) -> None:
        self._storage = storage
        self._key = key
        self._adapter = adapter
        self._items: list[T] = []
        self._lock = asyncio.Lock()

    @property
    def items(self) -> list[T]:
        """Copy of the current contents, most recent first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    async def load(self) -> None:
        """
        Replace the in-memory contents with what storage holds.

        Missing or unreadable data leaves the collection empty. Corruption
        is logged, never raised.
        """
        raw = await self._storage.get(self._key)
        if raw is None:
            self._items = []
            return
        if not isinstance(raw, (str, bytes)):
            logger.warning("Discarding %r: stored value is %s, not JSON text", self._key, type(raw).__name__)
            self._items = []
            return
        try:
            self._items = self._adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding corrupt data under %r: %s", self._key, exc.errors()[:1])
            self._items = []
            return
        logger.debug("Loaded %d records from %r", len(self._items), self._key)

    async def _commit(self, change: Callable[[list[T]], list[T]]) -> list[T]:
        """
        Apply change to a copy of the contents, persist the copy, then adopt it.

        The in-memory list only moves once the write has succeeded, so a failed
        write leaves memory and storage agreeing on the previous contents.

        Raises:
            PersistenceError: the storage backend rejected the write.
        """
        async with self._lock:
            updated = change(list(self._items))
            payload = self._adapter.dump_json(updated).decode("utf-8")
            try:
                await self._storage.set(self._key, payload)
            except Exception as exc:
                logger.error("Write to %r failed, keeping previous contents: %s", self._key, exc)
                raise PersistenceError(SAVE_FAILED_MESSAGE) from exc
            self._items = updated
            return updated

    async def save(self) -> None:
        """Write the current contents to storage as they are."""
        await self._commit(lambda current: current)
