from __future__ import annotations

from typing import Dict, Protocol, Sequence

from .model import SessionInfo, SummaryRow


class AttendanceStore(Protocol):
    def resolve_person_ids(self, id_numbers: Sequence[str]) -> Dict[str, int]:
        """Map id numbers to person ids; unknown numbers are simply absent."""

        raise NotImplementedError

    def save_submission(self, session: SessionInfo, rows: Sequence[SummaryRow]) -> int:
        """Upsert summaries and append detection logs in ONE transaction.

        Returns the number of summary rows written. Any error rolls back everything.
        """

        raise NotImplementedError
