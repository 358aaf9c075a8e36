"""
storage.py — Key/value persistence for the session stores.

Each store keeps its whole collection as one JSON string under a fixed key,
overwritten on every mutation. Two backends share the same async interface:

  MongoKeyValueStorage  — one document per key in a Motor collection:
                          {"_id": <key>, "value": <json str>, "updated_at": ...}
  MemoryKeyValueStorage — process-local dict; used when MongoDB is
                          unavailable at startup (see database.py) and
                          in tests.
"""

from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase


class MongoKeyValueStorage:
    """Stores string values keyed by name in a single MongoDB collection."""

    def __init__(self, db: AsyncIOMotorDatabase, collection: str) -> None:
        self._collection = db[collection]

    async def get(self, key: str) -> Optional[str]:
        doc = await self._collection.find_one({"_id": key})
        if doc is None:
            return None
        return doc.get("value")

    async def set(self, key: str, value: str) -> None:
        await self._collection.update_one(
            {"_id": key},
            {"$set": {"value": value, "updated_at": datetime.now(timezone.utc)}},
            upsert=True,
        )


class MemoryKeyValueStorage:
    """Dict-backed storage. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
