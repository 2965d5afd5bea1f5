from __future__ import annotations

from typing import Dict, Sequence

from ..model import Detection
from .base import DetectionAssignmentStrategy


class PositionalStrategy(DetectionAssignmentStrategy):
    """Placeholder policy: i-th detection goes to the i-th student of the roster order.

    No identity matching happens here; surplus detections are dropped.
    """

    name = "positional"

    def assign(self, detections: Sequence[Detection], roster_order: Sequence[int]) -> Dict[int, float]:
        return {student_id: det.confidence for det, student_id in zip(detections, roster_order)}
