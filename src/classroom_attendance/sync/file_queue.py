from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..common.datetime_utils import now_utc, to_iso
from .queue import SubmissionQueue

logger = logging.getLogger(__name__)

_PREFIX = "attendance_"
_SAFE_ID = re.compile(r"[^A-Za-z0-9_.-]")


class FileSubmissionQueue(SubmissionQueue):
    """One JSON file per session under ``directory``.

    Writes go through a temp file + ``os.replace`` so a crash never leaves a
    half-written payload behind.
    """

    def __init__(self, directory: str | Path):
        self._dir = Path(directory)

    def _path(self, session_id: str) -> Path:
        return self._dir / f"{_PREFIX}{_SAFE_ID.sub('_', session_id)}.json"

    def enqueue(self, session_id: str, payload: Dict[str, Any]) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        document = {"session_id": session_id, "saved_at": to_iso(now_utc()), "payload": payload}

        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".tmp_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh)
            os.replace(tmp_name, self._path(session_id))
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info("Attendance for %s saved locally", session_id)

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        path = self._path(session_id)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)["payload"]

    def dequeue(self, session_id: str) -> Optional[Dict[str, Any]]:
        payload = self.load(session_id)
        if payload is not None:
            self._path(session_id).unlink()
        return payload

    def list_pending(self) -> List[str]:
        if not self._dir.exists():
            return []
        pending = []
        for path in sorted(self._dir.glob(f"{_PREFIX}*.json")):
            with path.open("r", encoding="utf-8") as fh:
                pending.append(json.load(fh)["session_id"])
        return pending
