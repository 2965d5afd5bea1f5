from __future__ import annotations

import logging
from typing import Any, Dict, List, Set

from ..common.confidence import confidence_stats
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from .model import BatchSummary, DetectionEvent, SessionInfo, SubmittedRecord, SummaryRow
from .repository import AttendanceStore

logger = logging.getLogger(__name__)


def build_summary_row(session_id: str, person_id: int, record: SubmittedRecord) -> SummaryRow:
    stats = confidence_stats(record.confidence_scores)
    return SummaryRow(
        session_id=session_id,
        person_id=int(person_id),
        detection_count=record.detection_count,
        confidence_avg=stats.avg,
        confidence_min=stats.min,
        confidence_max=stats.max,
        first_detected_at=min(record.timestamps) if record.timestamps else None,
        last_detected_at=max(record.timestamps) if record.timestamps else None,
        status=record.status,
        events=tuple(
            DetectionEvent(detection_index=i, confidence=score, detected_at=ts)
            for i, (score, ts) in enumerate(zip(record.confidence_scores, record.timestamps))
        ),
    )


class AttendanceStorageService:
    """Use case behind POST /attendance/batch-submit.

    Re-submitting a session overwrites its summary rows (upsert on
    session + person); students whose id number does not resolve, or whose
    record is malformed or repeats an earlier one, are counted as failed
    without failing the batch.
    """

    def __init__(self, store: AttendanceStore):
        self._store = store

    def batch_submit(self, payload: Dict[str, Any]) -> BatchSummary:
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        session_id = require_non_empty(str(payload.get("session_id") or ""), "session_id")
        attendance_data = payload.get("attendance_data")
        if not isinstance(attendance_data, list):
            raise ValidationError("attendance_data must be a list")

        session = SessionInfo.from_api(session_id, payload)
        total = len(attendance_data)

        records: List[SubmittedRecord] = []
        for item in attendance_data:
            try:
                records.append(SubmittedRecord.from_api(item))
            except ValidationError as e:
                logger.warning("Session %s: skipping malformed record (%s)", session_id, e)

        person_ids = self._store.resolve_person_ids([r.id_number for r in records]) if records else {}

        rows: List[SummaryRow] = []
        unresolved: List[str] = []
        seen: Set[int] = set()
        for record in records:
            person_id = person_ids.get(record.id_number)
            if person_id is None:
                unresolved.append(record.id_number)
                continue
            if person_id in seen:
                logger.warning("Session %s: duplicate record for %s ignored", session_id, record.id_number)
                continue
            seen.add(person_id)
            rows.append(build_summary_row(session_id, person_id, record))

        if unresolved:
            logger.warning("Session %s: %d id numbers did not resolve", session_id, len(unresolved))

        successful = self._store.save_submission(session, rows)
        logger.info("Session %s stored: %d/%d students", session_id, successful, total)
        return BatchSummary(successful=successful, failed=total - successful, total=total, unresolved=tuple(unresolved))
