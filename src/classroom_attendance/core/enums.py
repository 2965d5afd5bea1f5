from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role carried in login tokens."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Per-student verdict derived from the detection count."""

    ABSENT = "absent"
    PARTIAL = "partial"
    PRESENT = "present"


class VideoSourceKind(str, Enum):
    WEBCAM = "webcam"
    SCREEN = "screen"


class SessionState(str, Enum):
    """Lifecycle of one SessionController."""

    IDLE = "idle"
    SOURCE_SELECTED = "source_selected"
    ACTIVE = "active"
    ENDED = "ended"
    UPLOADED = "uploaded"
