from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.exceptions import ApiError, SubmissionFailed
from ..sessions.model import SubmissionPayload
from .api_client import ApiClient
from .queue import SubmissionQueue

logger = logging.getLogger(__name__)

BATCH_SUBMIT_ENDPOINT = "/attendance/batch-submit"


@dataclass(frozen=True)
class SubmissionSummary:
    successful: int
    failed: int
    total: int

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "SubmissionSummary":
        data = data or {}
        return cls(
            successful=int(data.get("successful", 0)),
            failed=int(data.get("failed", 0)),
            total=int(data.get("total", 0)),
        )


@dataclass(frozen=True)
class SubmissionResult:
    session_id: str
    summary: SubmissionSummary
    message: str = ""


@dataclass(frozen=True)
class RetryOutcome:
    session_id: str
    result: Optional[SubmissionResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class SyncClient:
    """Submits finished sessions; failed submissions are parked in the queue.

    Retrying is up to the caller (see ``retry_pending``); nothing retries on its own.
    """

    def __init__(self, api: ApiClient, queue: SubmissionQueue):
        self._api = api
        self._queue = queue

    def submit(self, payload: SubmissionPayload) -> SubmissionResult:
        return self._submit_raw(payload.session_id, payload.to_dict())

    def _submit_raw(self, session_id: str, body: Dict[str, Any]) -> SubmissionResult:
        try:
            response = self._api.post(BATCH_SUBMIT_ENDPOINT, body)
            if not response.get("success"):
                raise ApiError(str(response.get("message") or response.get("error") or "Upload failed"))
        except ApiError as e:
            self._queue.enqueue(session_id, body)
            logger.warning("Upload of %s failed (%s); data saved locally for later sync", session_id, e)
            raise SubmissionFailed(
                f"Upload failed: {e}. Data saved locally for later sync.",
                session_id=session_id,
                queued=True,
            ) from e

        self._queue.dequeue(session_id)
        summary = SubmissionSummary.from_api(response.get("summary"))
        logger.info("Uploaded %s: %d/%d students processed", session_id, summary.successful, summary.total)
        return SubmissionResult(session_id=session_id, summary=summary, message=str(response.get("message", "")))

    def park(self, payload: SubmissionPayload) -> None:
        """Queue a payload without trying the network."""
        self._queue.enqueue(payload.session_id, payload.to_dict())

    def pending(self) -> List[str]:
        return self._queue.list_pending()

    def retry_pending(self) -> List[RetryOutcome]:
        outcomes = []
        for session_id in self._queue.list_pending():
            body = self._queue.load(session_id)
            if body is None:
                continue
            try:
                outcomes.append(RetryOutcome(session_id=session_id, result=self._submit_raw(session_id, body)))
            except SubmissionFailed as e:
                outcomes.append(RetryOutcome(session_id=session_id, error=str(e)))
        return outcomes
