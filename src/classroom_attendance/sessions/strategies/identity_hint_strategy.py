from __future__ import annotations

from typing import Dict, Sequence

from ..model import Detection
from .base import DetectionAssignmentStrategy


class IdentityHintStrategy(DetectionAssignmentStrategy):
    """Trust the detector's ``student_id`` hint.

    Detections without a hint, or naming a student outside the session, are
    ignored. Several detections of one student keep the highest confidence.
    """

    name = "identity_hint"

    def assign(self, detections: Sequence[Detection], roster_order: Sequence[int]) -> Dict[int, float]:
        allowed = set(roster_order)
        assigned: Dict[int, float] = {}
        for det in detections:
            if det.student_id is None or det.student_id not in allowed:
                continue
            if det.confidence > assigned.get(det.student_id, -1.0):
                assigned[det.student_id] = det.confidence
        return assigned
