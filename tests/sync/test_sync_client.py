from datetime import datetime, timezone

import pytest
import requests

from classroom_attendance.core.enums import AttendanceStatus, VideoSourceKind
from classroom_attendance.core.exceptions import ApiError, SubmissionFailed
from classroom_attendance.sessions.model import AttendanceRecord, SubmissionPayload
from classroom_attendance.sync.api_client import ApiClient
from classroom_attendance.sync.sync_client import SyncClient


class FakeResponse:
    def __init__(self, status_code=200, body=None, invalid_json=False):
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._invalid_json:
            raise ValueError("not json")
        return self._body


class FakeHttpSession:
    """Stands in for requests.Session; replies come from a queue."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def request(self, method, url, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "headers": headers, "timeout": timeout})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class InMemoryQueue:
    def __init__(self):
        self.items = {}

    def enqueue(self, session_id, payload):
        self.items[session_id] = payload

    def dequeue(self, session_id):
        return self.items.pop(session_id, None)

    def load(self, session_id):
        return self.items.get(session_id)

    def list_pending(self):
        return sorted(self.items)


def _payload(session_id="session_1"):
    ts = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    record = AttendanceRecord(
        session_id=session_id,
        student_id=1,
        name="Alice",
        id_number="2500032001",
        detection_count=1,
        confidence_scores=(0.9,),
        timestamps=(ts,),
        status=AttendanceStatus.PARTIAL,
    )
    return SubmissionPayload(
        session_id=session_id,
        subject="Physics",
        section_id="1",
        start_time=ts,
        end_time=ts,
        video_source=VideoSourceKind.WEBCAM,
        total_captures=5,
        records=(record,),
    )


OK_BODY = {"success": True, "message": "saved", "summary": {"successful": 1, "failed": 0, "total": 1}}


def test_submit_success_posts_payload_and_clears_queue():
    http = FakeHttpSession(FakeResponse(body=OK_BODY))
    queue = InMemoryQueue()
    queue.enqueue("session_1", {"stale": True})
    client = SyncClient(ApiClient("http://api.local/", session=http), queue)

    result = client.submit(_payload())

    call = http.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://api.local/attendance/batch-submit"
    assert call["json"]["attendance_data"][0]["id_number"] == "2500032001"
    assert "Authorization" not in call["headers"]
    assert result.summary.successful == 1
    assert queue.list_pending() == []


def test_bearer_token_is_sent_when_present():
    http = FakeHttpSession(FakeResponse(body=OK_BODY))
    api = ApiClient("http://api.local", session=http)
    api.set_token("abc")

    SyncClient(api, InMemoryQueue()).submit(_payload())

    assert http.calls[0]["headers"]["Authorization"] == "Bearer abc"


@pytest.mark.parametrize(
    "reply",
    [
        requests.ConnectionError("refused"),
        FakeResponse(status_code=500, body={"success": False}),
        FakeResponse(body={"success": False, "error": "db down"}),
        FakeResponse(invalid_json=True),
    ],
)
def test_submit_failure_enqueues_and_raises(reply):
    queue = InMemoryQueue()
    client = SyncClient(ApiClient("http://api.local", session=FakeHttpSession(reply)), queue)

    with pytest.raises(SubmissionFailed) as exc:
        client.submit(_payload())

    assert exc.value.queued is True
    assert exc.value.session_id == "session_1"
    assert queue.load("session_1")["session_id"] == "session_1"


def test_failed_twice_keeps_one_queued_copy():
    queue = InMemoryQueue()
    http = FakeHttpSession(requests.Timeout("slow"), requests.Timeout("slow"))
    client = SyncClient(ApiClient("http://api.local", session=http), queue)

    for _ in range(2):
        with pytest.raises(SubmissionFailed):
            client.submit(_payload())

    assert queue.list_pending() == ["session_1"]


def test_retry_pending_reports_each_session():
    queue = InMemoryQueue()
    queue.enqueue("session_a", _payload("session_a").to_dict())
    queue.enqueue("session_b", _payload("session_b").to_dict())
    http = FakeHttpSession(FakeResponse(body=OK_BODY), requests.ConnectionError("refused"))
    client = SyncClient(ApiClient("http://api.local", session=http), queue)

    outcomes = client.retry_pending()

    assert [(o.session_id, o.ok) for o in outcomes] == [("session_a", True), ("session_b", False)]
    assert queue.list_pending() == ["session_b"]


def test_api_error_carries_status_code():
    api = ApiClient("http://api.local", session=FakeHttpSession(FakeResponse(status_code=403, body={})))

    with pytest.raises(ApiError) as exc:
        api.get("/students")

    assert exc.value.status_code == 403
