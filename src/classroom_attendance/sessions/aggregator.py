from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Mapping, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, DetectionBatch
from .strategies.base import DetectionAssignmentStrategy

logger = logging.getLogger(__name__)


def compute_status(detection_count: int, required_detections: int) -> AttendanceStatus:
    if detection_count >= required_detections:
        return AttendanceStatus.PRESENT
    if detection_count > 0:
        return AttendanceStatus.PARTIAL
    return AttendanceStatus.ABSENT


class Aggregator:
    """Folds one capture tick into the session's record set.

    ``apply`` never mutates its input; it returns the next record set.
    """

    def __init__(self, strategy: DetectionAssignmentStrategy, *, required_detections: int):
        self._strategy = strategy
        self._required = int(required_detections)

    @property
    def strategy(self) -> DetectionAssignmentStrategy:
        return self._strategy

    def apply(
        self,
        batch: DetectionBatch,
        records: Mapping[int, AttendanceRecord],
        roster_order: Sequence[int],
    ) -> Dict[int, AttendanceRecord]:
        assigned = self._strategy.assign(batch.detections, roster_order)

        updated = dict(records)
        processed = 0
        for student_id, confidence in assigned.items():
            record = updated.get(student_id)
            if record is None:
                continue
            count = record.detection_count + 1
            updated[student_id] = replace(
                record,
                detection_count=count,
                confidence_scores=record.confidence_scores + (float(confidence),),
                timestamps=record.timestamps + (batch.frame_timestamp,),
            )
            processed += 1

        # Status is recomputed for every record on every tick.
        for student_id, record in updated.items():
            status = compute_status(record.detection_count, self._required)
            if status != record.status:
                updated[student_id] = replace(record, status=status)

        logger.debug("Capture %d: processed %d student detections", batch.capture_index, processed)
        return updated
