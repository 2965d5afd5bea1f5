from __future__ import annotations

from datetime import datetime, timezone

import pytest

from classroom_attendance.core.enums import AttendanceStatus
from classroom_attendance.core.exceptions import ValidationError
from classroom_attendance.storage.service import AttendanceStorageService


class InMemoryStore:
    """Mimics the unique keys of face_attendance and face_detection_log."""

    def __init__(self, people: dict[str, int]):
        self.people = people
        self.sessions = {}
        self.summaries = {}
        self.log = {}
        self.fail_on_save = False

    def resolve_person_ids(self, id_numbers):
        return {n: self.people[n] for n in id_numbers if n in self.people}

    def save_submission(self, session, rows):
        if self.fail_on_save:
            raise RuntimeError("deadlock")
        self.sessions[session.session_id] = session
        for row in rows:
            self.summaries[(row.session_id, row.person_id)] = row
            for event in row.events:
                self.log.setdefault((row.session_id, row.person_id, event.detection_index), event)
        return len(rows)


def _record(id_number, scores, status="partial"):
    base = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    return {
        "student_id": 1,
        "name": "x",
        "id_number": id_number,
        "detection_count": len(scores),
        "confidence_scores": list(scores),
        "timestamps": [base.replace(minute=10 * i).isoformat() for i in range(len(scores))],
        "status": status,
    }


def _payload(*records):
    return {
        "session_id": "session_1",
        "subject": "Physics",
        "section_id": "1",
        "start_time": "2026-03-02T09:00:00Z",
        "end_time": "2026-03-02T09:50:00Z",
        "video_source": "webcam",
        "total_captures": 5,
        "attendance_data": list(records),
    }


def test_resubmission_is_idempotent():
    store = InMemoryStore({"A1": 10, "B2": 20})
    svc = AttendanceStorageService(store)
    payload = _payload(_record("A1", [0.8, 0.9], "present"), _record("B2", [0.7]))

    first = svc.batch_submit(payload)
    second = svc.batch_submit(payload)

    assert first == second
    assert first.successful == 2 and first.failed == 0 and first.total == 2
    assert sorted(store.summaries) == [("session_1", 10), ("session_1", 20)]
    assert len(store.log) == 3


def test_unresolved_students_count_as_failed():
    store = InMemoryStore({"A1": 10})
    svc = AttendanceStorageService(store)

    summary = svc.batch_submit(_payload(_record("A1", [0.8]), _record("ZZ", [0.9])))

    assert summary.successful == 1
    assert summary.failed == 1
    assert summary.total == 2
    assert summary.unresolved == ("ZZ",)
    assert summary.to_api()["unresolved"] == ["ZZ"]


def test_summary_row_stats():
    store = InMemoryStore({"A1": 10, "B2": 20})
    svc = AttendanceStorageService(store)

    svc.batch_submit(_payload(_record("A1", [0.6, 0.9, 0.75], "present"), _record("B2", [], "absent")))

    a = store.summaries[("session_1", 10)]
    assert a.confidence_avg == pytest.approx(0.75)
    assert a.confidence_min == pytest.approx(0.6)
    assert a.confidence_max == pytest.approx(0.9)
    assert a.first_detected_at == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    assert a.last_detected_at == datetime(2026, 3, 2, 9, 20, tzinfo=timezone.utc)
    assert a.status == AttendanceStatus.PRESENT

    b = store.summaries[("session_1", 20)]
    assert (b.confidence_avg, b.confidence_min, b.confidence_max) == (0.0, 0.0, 0.0)
    assert b.first_detected_at is None
    assert b.events == ()


def test_malformed_record_is_counted_as_failed():
    store = InMemoryStore({"A1": 10, "B2": 20})
    svc = AttendanceStorageService(store)
    bad = _record("B2", [0.7])
    bad["detection_count"] = 4

    summary = svc.batch_submit(_payload(_record("A1", [0.8]), bad))

    assert (summary.successful, summary.failed, summary.total) == (1, 1, 2)


def test_repeated_id_number_keeps_first_record_and_counts_repeat_as_failed():
    store = InMemoryStore({"A1": 10})
    svc = AttendanceStorageService(store)

    summary = svc.batch_submit(_payload(_record("A1", [0.8, 0.9], "present"), _record("A1", [0.7])))

    assert (summary.successful, summary.failed, summary.total) == (1, 1, 2)
    assert list(store.summaries) == [("session_1", 10)]
    assert store.summaries[("session_1", 10)].detection_count == 2


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"attendance_data": []},
        {"session_id": "s", "attendance_data": "nope"},
        {"session_id": "s", "attendance_data": [], "section_id": "abc"},
    ],
)
def test_invalid_body_raises_validation_error(payload):
    with pytest.raises(ValidationError):
        AttendanceStorageService(InMemoryStore({})).batch_submit(payload)


def test_storage_failure_propagates():
    store = InMemoryStore({"A1": 10})
    store.fail_on_save = True

    with pytest.raises(RuntimeError):
        AttendanceStorageService(store).batch_submit(_payload(_record("A1", [0.8])))

    assert store.summaries == {}
