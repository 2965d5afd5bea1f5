from datetime import datetime, timezone

import pytest

from classroom_attendance.core.enums import AttendanceStatus
from classroom_attendance.sessions.aggregator import Aggregator, compute_status
from classroom_attendance.sessions.model import AttendanceRecord, Detection, DetectionBatch
from classroom_attendance.sessions.strategies.identity_hint_strategy import IdentityHintStrategy
from classroom_attendance.sessions.strategies.positional_strategy import PositionalStrategy


def _records(*student_ids):
    return {
        sid: AttendanceRecord(session_id="s1", student_id=sid, name=f"Student {sid}", id_number=f"ID{sid}")
        for sid in student_ids
    }


def _batch(index, *detections):
    return DetectionBatch(
        capture_index=index,
        frame_timestamp=datetime(2026, 3, 2, 9, index, tzinfo=timezone.utc),
        detections=tuple(detections),
    )


@pytest.mark.parametrize(
    "count,expected",
    [
        (0, AttendanceStatus.ABSENT),
        (1, AttendanceStatus.PARTIAL),
        (2, AttendanceStatus.PARTIAL),
        (3, AttendanceStatus.PRESENT),
        (7, AttendanceStatus.PRESENT),
    ],
)
def test_status_rule(count, expected):
    assert compute_status(count, 3) == expected


def test_apply_appends_confidence_and_timestamp_without_mutating_input():
    agg = Aggregator(PositionalStrategy(), required_detections=2)
    records = _records(10, 20)

    out = agg.apply(_batch(1, Detection(box_id=0, confidence=0.8)), records, [10, 20])

    assert records[10].detection_count == 0
    assert out[10].detection_count == 1
    assert out[10].confidence_scores == (0.8,)
    assert out[10].timestamps == (datetime(2026, 3, 2, 9, 1, tzinfo=timezone.utc),)
    assert out[10].status == AttendanceStatus.PARTIAL
    assert out[20] is records[20]


def test_surplus_detections_are_dropped():
    agg = Aggregator(PositionalStrategy(), required_detections=1)
    records = _records(1)

    out = agg.apply(
        _batch(1, Detection(box_id=0, confidence=0.9), Detection(box_id=1, confidence=0.7)),
        records,
        [1],
    )

    assert out[1].detection_count == 1
    assert out[1].status == AttendanceStatus.PRESENT
    assert set(out) == {1}


def test_students_outside_the_record_set_are_ignored():
    agg = Aggregator(IdentityHintStrategy(), required_detections=3)
    records = _records(1, 2)

    # 2 is in the roster order but has no record; 99 is unknown entirely.
    out = agg.apply(
        _batch(1, Detection(box_id=0, confidence=0.9, student_id=99), Detection(box_id=1, confidence=0.8, student_id=2)),
        {1: records[1]},
        [1, 2],
    )

    assert set(out) == {1}
    assert out[1].detection_count == 0


def test_identity_hint_keeps_best_confidence_per_student():
    strategy = IdentityHintStrategy()

    assigned = strategy.assign(
        [
            Detection(box_id=0, confidence=0.6, student_id=5),
            Detection(box_id=1, confidence=0.9, student_id=5),
            Detection(box_id=2, confidence=0.7),
        ],
        [5, 6],
    )

    assert assigned == {5: 0.9}
