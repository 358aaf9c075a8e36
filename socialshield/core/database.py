"""
MongoDB connection for the session stores, using Motor (async driver).

open() connects, pings and hands back the key/value backend the stores
write through. If the ping fails the app keeps running on
MemoryKeyValueStorage: history and reports then last only as long as
the process.

Local dev: the Docker Compose mongo container.
Production: MongoDB Atlas (same code, different URI).
"""

import logging
import re
from typing import Optional

import certifi
from motor.motor_asyncio import AsyncIOMotorClient

from socialshield.core.config import settings
from socialshield.core.storage import MemoryKeyValueStorage, MongoKeyValueStorage

logger = logging.getLogger(__name__)


class MongoConnection:
    """Owns the Motor client for one URI and database name."""

    def __init__(self, uri: str, db_name: str) -> None:
        self.uri = uri
        self.db_name = db_name
        self.client: Optional[AsyncIOMotorClient] = None

    async def open(self, collection: str):
        """
        Connect and return storage over `collection`.

        Returns MongoKeyValueStorage when the server answers a ping,
        MemoryKeyValueStorage otherwise. Never raises.
        """
        logger.info("Connecting to MongoDB at %s", _redact_uri(self.uri))
        try:
            # certifi's bundle carries the CA Atlas certificates chain to.
            client = AsyncIOMotorClient(
                self.uri,
                serverSelectionTimeoutMS=5000,
                tlsCAFile=certifi.where(),
            )
            await client.admin.command("ping")
        except Exception as exc:
            logger.warning(
                "MongoDB unavailable at startup: %s. "
                "Using in-memory storage: history and reports will not survive a restart.",
                exc,
            )
            self.client = None
            return MemoryKeyValueStorage()

        self.client = client
        logger.info("MongoDB connection established (db: %s, collection: %s)", self.db_name, collection)
        return MongoKeyValueStorage(client[self.db_name], collection)

    async def ping(self) -> bool:
        """True when a connection is open and the server answers."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except Exception as exc:
            logger.warning("DB ping failed: %s", exc)
            return False
        return True

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")


mongo = MongoConnection(settings.mongo_uri, settings.mongo_db_name)


def _redact_uri(uri: str) -> str:
    """Strip credentials from URI before logging."""
    return re.sub(r"://[^:]+:[^@]+@", "://<redacted>@", uri)
