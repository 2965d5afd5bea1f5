from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from ..common.confidence import ConfidenceStats, confidence_stats
from ..common.datetime_utils import parse_iso, to_iso
from ..common.validators import require_positive_int, require_unit_interval
from ..core import constants
from ..core.enums import AttendanceStatus, VideoSourceKind


@dataclass(frozen=True)
class SessionConfig:
    capture_interval_ms: int = constants.DEFAULT_CAPTURE_INTERVAL_MS
    session_duration_ms: int = constants.DEFAULT_SESSION_DURATION_MS
    required_detections: int = constants.DEFAULT_REQUIRED_DETECTIONS
    total_captures: int = constants.DEFAULT_TOTAL_CAPTURES
    detection_timeout_ms: int = constants.DEFAULT_DETECTION_TIMEOUT_MS
    assignment_strategy: str = "positional"

    def __post_init__(self):
        for name in (
            "capture_interval_ms",
            "session_duration_ms",
            "required_detections",
            "total_captures",
            "detection_timeout_ms",
        ):
            require_positive_int(getattr(self, name), name)

    @classmethod
    def from_settings(cls, settings) -> "SessionConfig":
        return cls(
            capture_interval_ms=int(getattr(settings, "CAPTURE_INTERVAL_MS", constants.DEFAULT_CAPTURE_INTERVAL_MS)),
            session_duration_ms=int(getattr(settings, "SESSION_DURATION_MS", constants.DEFAULT_SESSION_DURATION_MS)),
            required_detections=int(getattr(settings, "REQUIRED_DETECTIONS", constants.DEFAULT_REQUIRED_DETECTIONS)),
            total_captures=int(getattr(settings, "TOTAL_CAPTURES", constants.DEFAULT_TOTAL_CAPTURES)),
            detection_timeout_ms=int(getattr(settings, "DETECTION_TIMEOUT_MS", constants.DEFAULT_DETECTION_TIMEOUT_MS)),
            assignment_strategy=str(getattr(settings, "ASSIGNMENT_STRATEGY", "positional")),
        )


@dataclass(frozen=True)
class Detection:
    """One face found in a frame.

    ``student_id`` is an identity hint for detectors that can recognise faces.
    """

    box_id: int
    confidence: float
    student_id: Optional[int] = None

    def __post_init__(self):
        require_unit_interval(self.confidence, "confidence")


@dataclass(frozen=True)
class DetectionBatch:
    capture_index: int
    frame_timestamp: datetime
    detections: Tuple[Detection, ...]


@dataclass(frozen=True)
class Session:
    session_id: str
    subject: str
    section_id: str
    section_name: str
    video_source: VideoSourceKind
    start_time: datetime
    roster_order: Tuple[int, ...]
    end_time: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Accumulated detections of one student in one session."""

    session_id: str
    student_id: int
    name: str
    id_number: str
    detection_count: int = 0
    confidence_scores: Tuple[float, ...] = ()
    timestamps: Tuple[datetime, ...] = ()
    status: AttendanceStatus = AttendanceStatus.ABSENT

    @property
    def stats(self) -> ConfidenceStats:
        return confidence_stats(self.confidence_scores)

    @property
    def last_seen(self) -> Optional[datetime]:
        return self.timestamps[-1] if self.timestamps else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "id_number": self.id_number,
            "detection_count": self.detection_count,
            "confidence_scores": list(self.confidence_scores),
            "timestamps": [to_iso(t) for t in self.timestamps],
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, session_id: str, data: Dict[str, Any]) -> "AttendanceRecord":
        return cls(
            session_id=session_id,
            student_id=int(data["student_id"]),
            name=str(data.get("name", "")),
            id_number=str(data["id_number"]),
            detection_count=int(data.get("detection_count", 0)),
            confidence_scores=tuple(float(v) for v in data.get("confidence_scores", [])),
            timestamps=tuple(parse_iso(v) for v in data.get("timestamps", [])),
            status=AttendanceStatus(data.get("status", AttendanceStatus.ABSENT.value)),
        )


@dataclass(frozen=True)
class SubmissionPayload:
    """Snapshot of a finished session, sent to POST /attendance/batch-submit."""

    session_id: str
    subject: str
    section_id: str
    start_time: datetime
    end_time: datetime
    video_source: VideoSourceKind
    total_captures: int
    records: Tuple[AttendanceRecord, ...] = field(default_factory=tuple)

    @classmethod
    def from_session(
        cls, session: Session, records: Sequence[AttendanceRecord], *, total_captures: int
    ) -> "SubmissionPayload":
        if session.end_time is None:
            raise ValueError("Session has not ended")
        return cls(
            session_id=session.session_id,
            subject=session.subject,
            section_id=session.section_id,
            start_time=session.start_time,
            end_time=session.end_time,
            video_source=session.video_source,
            total_captures=total_captures,
            records=tuple(records),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "subject": self.subject,
            "section_id": self.section_id,
            "start_time": to_iso(self.start_time),
            "end_time": to_iso(self.end_time),
            "video_source": self.video_source.value,
            "total_captures": self.total_captures,
            "attendance_data": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubmissionPayload":
        session_id = str(data["session_id"])
        return cls(
            session_id=session_id,
            subject=str(data.get("subject", "")),
            section_id=str(data.get("section_id", "")),
            start_time=parse_iso(data["start_time"]),
            end_time=parse_iso(data["end_time"]),
            video_source=VideoSourceKind(data.get("video_source", VideoSourceKind.WEBCAM.value)),
            total_captures=int(data.get("total_captures", 0)),
            records=tuple(AttendanceRecord.from_dict(session_id, item) for item in data.get("attendance_data", [])),
        )
