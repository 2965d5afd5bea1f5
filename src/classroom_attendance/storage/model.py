from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ..common.datetime_utils import parse_iso
from ..common.validators import require_non_empty, require_unit_interval
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class SubmittedRecord:
    """One element of ``attendance_data`` as sent by the client."""

    id_number: str
    detection_count: int
    confidence_scores: Tuple[float, ...]
    timestamps: Tuple[datetime, ...]
    status: AttendanceStatus
    student_id: Optional[int] = None
    name: str = ""

    @classmethod
    def from_api(cls, data: Any) -> "SubmittedRecord":
        if not isinstance(data, dict):
            raise ValidationError("attendance record must be an object")

        id_number = require_non_empty(str(data.get("id_number") or ""), "id_number")
        scores = tuple(require_unit_interval(v, "confidence") for v in data.get("confidence_scores") or [])
        try:
            timestamps = tuple(parse_iso(str(v)) for v in data.get("timestamps") or [])
            count = int(data.get("detection_count", len(scores)))
            status = AttendanceStatus(data.get("status", AttendanceStatus.ABSENT.value))
        except ValueError as e:
            raise ValidationError(f"invalid attendance record for {id_number}: {e}") from e

        if not (count == len(scores) == len(timestamps)):
            raise ValidationError(f"detection_count/confidence_scores/timestamps disagree for {id_number}")

        student_id = data.get("student_id")
        return cls(
            id_number=id_number,
            detection_count=count,
            confidence_scores=scores,
            timestamps=timestamps,
            status=status,
            student_id=int(student_id) if student_id is not None else None,
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class DetectionEvent:
    detection_index: int
    confidence: float
    detected_at: datetime


@dataclass(frozen=True)
class SummaryRow:
    """What gets upserted into ``face_attendance`` for one (session, person)."""

    session_id: str
    person_id: int
    detection_count: int
    confidence_avg: float
    confidence_min: float
    confidence_max: float
    first_detected_at: Optional[datetime]
    last_detected_at: Optional[datetime]
    status: AttendanceStatus
    events: Tuple[DetectionEvent, ...] = ()


@dataclass(frozen=True)
class SessionInfo:
    session_id: str
    subject: Optional[str] = None
    section_id: Optional[int] = None
    video_source: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_captures: Optional[int] = None

    @classmethod
    def from_api(cls, session_id: str, data: Dict[str, Any]) -> "SessionInfo":
        def _dt(key: str) -> Optional[datetime]:
            value = data.get(key)
            return parse_iso(str(value)) if value else None

        def _int(key: str) -> Optional[int]:
            value = data.get(key)
            return int(value) if value not in (None, "") else None

        try:
            return cls(
                session_id=session_id,
                subject=data.get("subject"),
                section_id=_int("section_id"),
                video_source=data.get("video_source"),
                start_time=_dt("start_time"),
                end_time=_dt("end_time"),
                total_captures=_int("total_captures"),
            )
        except ValueError as e:
            raise ValidationError(f"invalid session fields: {e}") from e


@dataclass(frozen=True)
class BatchSummary:
    successful: int
    failed: int
    total: int
    unresolved: Tuple[str, ...] = ()

    def to_api(self) -> Dict[str, Any]:
        return {
            "successful": self.successful,
            "failed": self.failed,
            "total": self.total,
            "unresolved": list(self.unresolved),
        }
