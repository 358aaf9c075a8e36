"""
reports.py — Unbounded log of user disagreement reports.

No cap and no de-duplication: the same result may be reported many times.
"""

from typing import Optional

from socialshield.core.config import settings
from socialshield.models.analysis import ReportList, UserReport
from socialshield.services.collection import PersistedCollection


class ReportStore(PersistedCollection[UserReport]):
    def __init__(self, storage, key: Optional[str] = None) -> None:
        super().__init__(storage, key or settings.reports_key, ReportList)

    def count(self) -> int:
        return len(self._items)

    async def append(self, report: UserReport) -> None:
        await self._commit(lambda current: [report] + current)
