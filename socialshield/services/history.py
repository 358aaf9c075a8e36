"""
history.py — Bounded log of past classification results.

Most recent first, unique by id, capped at settings.history_limit (10).
Prepending past the cap silently drops the oldest entries.
"""

import logging
from typing import Optional

from socialshield.core.config import settings
from socialshield.models.analysis import ClassificationResult, ResultList
from socialshield.services.collection import PersistedCollection

logger = logging.getLogger(__name__)


class ResultStore(PersistedCollection[ClassificationResult]):
    def __init__(self, storage, key: Optional[str] = None, limit: Optional[int] = None) -> None:
        super().__init__(storage, key or settings.history_key, ResultList)
        self.limit = limit if limit is not None else settings.history_limit

    def get(self, result_id: str) -> Optional[ClassificationResult]:
        for item in self._items:
            if item.id == result_id:
                return item
        return None

    async def prepend(self, result: ClassificationResult) -> None:
        def change(current: list[ClassificationResult]) -> list[ClassificationResult]:
            items = [result] + [item for item in current if item.id != result.id]
            if len(items) > self.limit:
                logger.debug("History full, evicting %d oldest result(s)", len(items) - self.limit)
            return items[: self.limit]

        await self._commit(change)

    async def remove(self, result_id: str) -> bool:
        """Remove one result by id. Absent ids are ignored; returns whether anything changed."""
        if self.get(result_id) is None:
            return False
        await self._commit(lambda current: [item for item in current if item.id != result_id])
        return True

    async def clear(self) -> None:
        await self._commit(lambda current: [])
