from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from ..capture.source import CaptureSource, CaptureStream, DetectionSource
from ..common.datetime_utils import epoch_ms, now_utc
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, SessionState, VideoSourceKind
from ..core.exceptions import (
    DetectionCycleFailed,
    InvalidSessionParams,
    InvalidSessionState,
    SourceUnavailable,
    ValidationError,
)
from ..roster.service import RosterCache
from ..sync.sync_client import SubmissionResult, SyncClient
from .aggregator import Aggregator
from .factory import AssignmentStrategyFactory
from .model import AttendanceRecord, DetectionBatch, Session, SessionConfig, SubmissionPayload
from .scheduler import AsyncioScheduler, CaptureScheduler, Scheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSummary:
    total: int
    present: int
    partial: int
    absent: int
    capture_count: int
    total_captures: int


class SessionController:
    """State machine for one attendance-taking client.

    IDLE -> SOURCE_SELECTED -> ACTIVE -> ENDED -> UPLOADED; ``logout`` returns
    to IDLE from anywhere. Must be driven from inside a running asyncio loop.
    """

    def __init__(
        self,
        *,
        roster: RosterCache,
        capture: CaptureSource,
        detector: DetectionSource,
        sync: SyncClient,
        config: SessionConfig,
        scheduler: Optional[Scheduler] = None,
        strategy_factory: Optional[AssignmentStrategyFactory] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._roster = roster
        self._capture = capture
        self._detector = detector
        self._sync = sync
        self._config = config
        self._scheduler = scheduler or AsyncioScheduler()
        self._clock = clock

        factory = strategy_factory or AssignmentStrategyFactory()
        self._aggregator = Aggregator(
            factory.for_name(config.assignment_strategy),
            required_detections=config.required_detections,
        )

        self._state = SessionState.IDLE
        self._stream: Optional[CaptureStream] = None
        self._session: Optional[Session] = None
        self._records: dict[int, AttendanceRecord] = {}
        self._captures: Optional[CaptureScheduler] = None
        self._ended: Optional[asyncio.Event] = None

    # ----- read side -----

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def video_source(self) -> Optional[VideoSourceKind]:
        return self._stream.kind if self._stream is not None else None

    @property
    def processing(self) -> bool:
        """True while a detection cycle is in flight."""
        return self._captures is not None and self._captures.processing

    @property
    def records(self) -> Mapping[int, AttendanceRecord]:
        """Read-only snapshot of the current record set."""
        return MappingProxyType(dict(self._records))

    def ordered_records(self) -> List[AttendanceRecord]:
        return sorted(self._records.values(), key=lambda r: r.name)

    def summary(self) -> SessionSummary:
        records = list(self._records.values())
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        partial = sum(1 for r in records if r.status == AttendanceStatus.PARTIAL)
        return SessionSummary(
            total=len(records),
            present=present,
            partial=partial,
            absent=len(records) - present - partial,
            capture_count=self._captures.capture_count if self._captures else 0,
            total_captures=self._config.total_captures,
        )

    # ----- commands -----

    async def select_source(self, kind: VideoSourceKind | str) -> None:
        try:
            kind = VideoSourceKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown video source: {kind}") from None

        if self._state == SessionState.ACTIVE:
            raise InvalidSessionState("Cannot switch video source during an active session")

        if self._state == SessionState.ENDED:
            session = self._session
            await self._captures.wait_idle()
            if self._state != SessionState.ENDED or self._session is not session:
                raise InvalidSessionState("Session was reset while switching source")
            self._park_unsent()

        self._release_stream()
        if self._state == SessionState.SOURCE_SELECTED:
            self._state = SessionState.IDLE

        logger.info("Requesting %s access...", kind.value)
        try:
            stream = await self._capture.acquire(kind)
        except SourceUnavailable as e:
            logger.warning("Failed to access %s: %s", kind.value, e)
            raise

        # Frame reads run in a worker thread, so the ended signal can arrive from one.
        loop = asyncio.get_running_loop()
        stream.on_ended(lambda: loop.call_soon_threadsafe(self.handle_stream_ended, stream))
        self._stream = stream
        self._state = SessionState.SOURCE_SELECTED
        logger.info("%s active - ready for session", kind.value)

    def start(self, subject: str, section_id) -> Session:
        if self._state == SessionState.ACTIVE:
            raise InvalidSessionState("A session is already active")
        if self._state != SessionState.SOURCE_SELECTED or self._stream is None:
            raise SourceUnavailable("Please select a video source first")

        subject = require_non_empty(subject, "Subject", error=InvalidSessionParams)
        if section_id is None or not str(section_id).strip():
            raise InvalidSessionParams("Section is required")
        section = self._roster.resolve_section(section_id)
        if section is None:
            raise InvalidSessionParams(f"Unknown section: {section_id}")

        # Raises outside a running loop, before anything below mutates state.
        asyncio.get_running_loop()
        students = self._roster.students_in_section(section.name)

        started_at = self._clock()
        session = Session(
            session_id=f"session_{epoch_ms(started_at)}_{uuid.uuid4().hex[:8]}",
            subject=subject,
            section_id=str(section.id),
            section_name=section.name,
            video_source=self._stream.kind,
            start_time=started_at,
            roster_order=tuple(s.id for s in students),
        )

        self._session = session
        self._records = {
            s.id: AttendanceRecord(session_id=session.session_id, student_id=s.id, name=s.name, id_number=s.id_number)
            for s in students
        }
        self._state = SessionState.ACTIVE
        self._ended = asyncio.Event()
        self._captures = CaptureScheduler(
            self._scheduler,
            interval_ms=self._config.capture_interval_ms,
            duration_ms=self._config.session_duration_ms,
            total_captures=self._config.total_captures,
            run_cycle=self._capture_cycle,
            on_timeout=self.end,
        )

        logger.info(
            "Session %s started for %s - %s mode (%d students in %s)",
            session.session_id,
            subject,
            session.video_source.value,
            len(students),
            section.name,
        )
        self._captures.start()
        return session

    def end(self) -> None:
        if self._state != SessionState.ACTIVE:
            return

        self._captures.cancel()
        self._session = replace(self._session, end_time=self._clock())
        self._release_stream()
        self._state = SessionState.ENDED
        self._ended.set()
        logger.info("Session %s ended. Review attendance and upload when ready.", self._session.session_id)

    async def upload(self) -> SubmissionResult:
        if self._state != SessionState.ENDED:
            raise InvalidSessionState("Only an ended session can be uploaded")

        session = self._session
        await self._captures.wait_idle()
        if self._state != SessionState.ENDED or self._session is not session:
            raise InvalidSessionState("Session was reset during upload")

        logger.info("Uploading attendance data for %s...", session.session_id)
        payload = self.build_payload()
        result = await asyncio.to_thread(self._sync.submit, payload)
        if self._session is session:
            self._state = SessionState.UPLOADED
        return result

    def logout(self) -> None:
        if self._captures is not None:
            self._captures.cancel()
        self._release_stream()
        if self._ended is not None:
            self._ended.set()

        self._session = None
        self._records = {}
        self._captures = None
        self._ended = None
        self._state = SessionState.IDLE

    async def wait_ended(self) -> None:
        if self._state == SessionState.ACTIVE and self._ended is not None:
            await self._ended.wait()

    def build_payload(self) -> SubmissionPayload:
        if self._session is None or self._session.end_time is None:
            raise InvalidSessionState("No finished session")
        records = [self._records[sid] for sid in self._session.roster_order if sid in self._records]
        return SubmissionPayload.from_session(self._session, records, total_captures=self._config.total_captures)

    # ----- internals -----

    async def _capture_cycle(self, capture_index: int) -> None:
        session = self._session
        logger.info("Performing face detection (%d/%d)...", capture_index, self._config.total_captures)
        try:
            batch = await self._detect(capture_index)
        except DetectionCycleFailed as e:
            logger.warning("Face detection failed (%s). Continuing with next capture.", e)
            return

        if self._session is None or self._session.session_id != session.session_id:
            logger.info("Capture %d discarded: session was reset", capture_index)
            return

        self._records = self._aggregator.apply(batch, self._records, session.roster_order)

    async def _detect(self, capture_index: int) -> DetectionBatch:
        stream = self._stream
        if stream is None:
            raise DetectionCycleFailed("No capture source")

        timeout = self._config.detection_timeout_ms / 1000.0
        try:
            frame = await asyncio.to_thread(stream.read_frame)
            frame_time = self._clock()
            detections = await asyncio.wait_for(self._detector.detect(frame), timeout=timeout)
        except DetectionCycleFailed:
            raise
        except asyncio.TimeoutError as e:
            raise DetectionCycleFailed(f"detection timed out after {timeout:g}s") from e
        except Exception as e:
            # The detector is an external black box; any failure only costs this tick.
            raise DetectionCycleFailed(str(e) or type(e).__name__) from e

        logger.info("Detected %d faces in capture %d", len(detections), capture_index)
        return DetectionBatch(capture_index=capture_index, frame_timestamp=frame_time, detections=tuple(detections))

    def handle_stream_ended(self, stream: Optional[CaptureStream] = None) -> None:
        """The capture source stopped on its own (device unplugged, share stopped)."""
        if self._stream is None or (stream is not None and stream is not self._stream):
            return
        logger.warning("Video source stopped. Please select a video source to continue.")
        self._release_stream()
        if self._state == SessionState.SOURCE_SELECTED:
            self._state = SessionState.IDLE

    def _release_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.release()
        except Exception:
            logger.exception("Failed to release %s source", stream.kind.value)

    def _park_unsent(self) -> None:
        if self._session is None:
            return
        self._sync.park(self.build_payload())
        logger.warning("Session %s was not uploaded; saved locally for later sync", self._session.session_id)
