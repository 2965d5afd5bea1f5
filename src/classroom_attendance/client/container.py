from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from ..auth.demo_credentials import DemoCredentials
from ..capture.haar_detector import HaarCascadeDetector
from ..capture.opencv_source import OpenCVCaptureSource
from ..capture.source import CaptureSource, DetectionSource
from ..roster.api_roster_repository import ApiRosterRepository
from ..roster.model import Section
from ..roster.service import RosterCache
from ..sessions.model import SessionConfig
from ..sessions.scheduler import Scheduler
from ..sessions.session_controller import SessionController
from ..sync.api_client import ApiClient
from ..sync.file_queue import FileSubmissionQueue
from ..sync.sync_client import SyncClient
from .auth_client import AuthClient


@dataclass(frozen=True)
class ClientContainer:
    api: ApiClient
    auth: AuthClient
    sync: SyncClient
    roster: RosterCache
    controller: SessionController


def build_client(
    settings,
    *,
    capture: Optional[CaptureSource] = None,
    detector: Optional[DetectionSource] = None,
    scheduler: Optional[Scheduler] = None,
    http_session: Optional[requests.Session] = None,
) -> ClientContainer:
    api = ApiClient(settings.API_BASE_URL, timeout=settings.HTTP_TIMEOUT, session=http_session)
    demo = DemoCredentials(numeric_id=str(settings.DEMO_NUMERIC_ID)) if settings.ALLOW_DEMO_LOGIN else None
    sync = SyncClient(api, FileSubmissionQueue(settings.PENDING_QUEUE_DIR))

    roster = RosterCache(
        ApiRosterRepository(api),
        [Section(id=int(s["id"]), name=str(s["name"])) for s in settings.SECTIONS],
        sample_size=int(settings.SAMPLE_ROSTER_SIZE),
    )

    if capture is None:
        capture = OpenCVCaptureSource(camera_index=settings.CAMERA_INDEX)
    if detector is None:
        detector = HaarCascadeDetector(min_confidence=settings.DETECTION_CONFIDENCE)

    controller = SessionController(
        roster=roster,
        capture=capture,
        detector=detector,
        sync=sync,
        config=SessionConfig.from_settings(settings),
        scheduler=scheduler,
    )
    return ClientContainer(api=api, auth=AuthClient(api, demo=demo), sync=sync, roster=roster, controller=controller)
