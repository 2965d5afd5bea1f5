from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Sequence

from ..model import Detection


class DetectionAssignmentStrategy(ABC):
    """Strategy Pattern: decide which student each detection belongs to.

    Returns a mapping ``student_id -> confidence``; at most one entry per student.
    """

    name: str = ""

    @abstractmethod
    def assign(self, detections: Sequence[Detection], roster_order: Sequence[int]) -> Dict[int, float]:
        raise NotImplementedError
