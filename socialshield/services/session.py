"""
session.py — Single-slot request orchestration for one analyzer session.

The controller owns the input text, the active result, the last error and
the reporting sub-state, and drives the gateway and both stores.

REQUEST SLOT
────────────
  IDLE ──submit()──► SUBMITTING ──ok──► SUCCEEDED ─┐
                          │                         ├──► IDLE
                          └────fault──► FAILED ────┘

The guard in submit() is checked and flipped before the first await, so at
most one gateway call is ever outstanding. SUCCEEDED / FAILED are recorded
in last_outcome; the slot itself drops straight back to IDLE.

REPORTING
─────────
  CLOSED ⇄ OPEN ──submit_report()──► SUBMITTED (one-way)

Scoped to the displayed result: any change of active result resets it to CLOSED.

Rejected actions (blank input, busy slot, blank reason, no active result)
return False and change nothing. A storage write that fails leaves the
stores as they were and puts a message in error.
"""

import logging
from typing import Optional

from socialshield.models.analysis import ClassificationResult, UserReport
from socialshield.models.session import ReportingState, RequestState
from socialshield.services.collection import PersistenceError
from socialshield.services.history import ResultStore
from socialshield.services.reports import ReportStore

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong."


class SessionController:
    def __init__(self, gateway, results: ResultStore, reports: ReportStore) -> None:
        self.gateway = gateway
        self.results = results
        self.reports = reports

        self.input_text = ""
        self.state = RequestState.IDLE
        self.last_outcome: Optional[RequestState] = None
        self.active_result: Optional[ClassificationResult] = None
        self.error: Optional[str] = None
        self.reporting = ReportingState.CLOSED

        self._generation = 0

    # ── Request slot ──────────────────────────────────────────────────────────

    @property
    def is_submitting(self) -> bool:
        return self.state is RequestState.SUBMITTING

    def set_input(self, text: str) -> None:
        self.input_text = text

    async def submit(self) -> bool:
        """
        Classify the current input text.

        Returns False without side effects when the input is blank or a
        request is already in flight. Gateway faults and failed history writes
        are recorded in self.error and last_outcome, never raised. A result is
        only shown once it has been saved.
        """
        text = self.input_text
        if not text.strip() or self.is_submitting:
            return False

        self.state = RequestState.SUBMITTING
        self.error = None
        generation = self._generation

        try:
            try:
                result = await self.gateway.classify(text)
            except Exception as exc:
                if generation != self._generation:
                    logger.info("Discarding failure from a closed session: %s", exc)
                    return True
                logger.warning("Classification failed: %s", exc)
                self.error = str(exc) or GENERIC_ERROR
                self.last_outcome = RequestState.FAILED
                return True

            if generation != self._generation:
                logger.info("Discarding late result %s from a closed session", result.id)
                return True

            try:
                await self.results.prepend(result)
            except PersistenceError as exc:
                if generation != self._generation:
                    return True
                self.error = str(exc)
                self.last_outcome = RequestState.FAILED
                return True
            if generation != self._generation:
                logger.info("Discarding late result %s from a closed session", result.id)
                return True

            self._show(result)
            self.input_text = ""
            self.error = None
            self.last_outcome = RequestState.SUCCEEDED
            return True
        finally:
            if generation == self._generation:
                self.state = RequestState.IDLE

    def close(self) -> None:
        """End the session. Any response still in flight will be ignored."""
        self._generation += 1
        self.state = RequestState.IDLE

    # ── Active result + history ───────────────────────────────────────────────

    def _show(self, result: Optional[ClassificationResult]) -> None:
        self.active_result = result
        self.reporting = ReportingState.CLOSED

    def select_from_history(self, result_id: str) -> bool:
        result = self.results.get(result_id)
        if result is None:
            return False
        self._show(result)
        return True

    def dismiss_active_result(self) -> None:
        self._show(None)

    async def remove_from_history(self, result_id: str) -> bool:
        try:
            return await self.results.remove(result_id)
        except PersistenceError as exc:
            self.error = str(exc)
            return False

    async def clear_history(self) -> bool:
        try:
            await self.results.clear()
        except PersistenceError as exc:
            self.error = str(exc)
            return False
        return True

    # ── Reporting ─────────────────────────────────────────────────────────────

    def open_report(self) -> bool:
        if self.active_result is None or self.reporting is not ReportingState.CLOSED:
            return False
        self.reporting = ReportingState.OPEN
        return True

    def cancel_report(self) -> bool:
        if self.reporting is not ReportingState.OPEN:
            return False
        self.reporting = ReportingState.CLOSED
        return True

    async def submit_report(self, reason: str) -> bool:
        result = self.active_result
        if result is None or not reason.strip() or self.reporting is ReportingState.SUBMITTED:
            return False
        try:
            await self.reports.append(UserReport.from_result(result, reason))
        except PersistenceError as exc:
            self.error = str(exc)
            return False
        self.reporting = ReportingState.SUBMITTED
        logger.info("Report filed against %s (%s)", result.id, result.status.value)
        return True

    # ── Presentation ──────────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        return {
            "input_text": self.input_text,
            "is_submitting": self.is_submitting,
            "state": self.state,
            "last_outcome": self.last_outcome,
            "active_result": self.active_result,
            "error": self.error,
            "reporting": self.reporting,
            "history": self.results.items,
            "report_count": self.reports.count(),
        }
