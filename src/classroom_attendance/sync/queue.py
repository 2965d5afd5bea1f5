from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol


class SubmissionQueue(Protocol):
    """Durable store of session payloads waiting for a successful upload.

    Keyed by session id: enqueueing the same session again overwrites it.
    """

    def enqueue(self, session_id: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    def dequeue(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Remove and return the queued payload, if any."""

        raise NotImplementedError

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def list_pending(self) -> List[str]:
        raise NotImplementedError
