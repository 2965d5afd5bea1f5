from classroom_attendance.sync.file_queue import FileSubmissionQueue


def test_enqueue_overwrites_per_session(tmp_path):
    queue = FileSubmissionQueue(tmp_path / "pending")

    queue.enqueue("session_1", {"v": 1})
    queue.enqueue("session_1", {"v": 2})
    queue.enqueue("session_2", {"v": 3})

    assert queue.list_pending() == ["session_1", "session_2"]
    assert queue.load("session_1") == {"v": 2}
    assert not list((tmp_path / "pending").glob(".tmp_*"))


def test_dequeue_removes_file(tmp_path):
    queue = FileSubmissionQueue(tmp_path)
    queue.enqueue("session_1", {"v": 1})

    assert queue.dequeue("session_1") == {"v": 1}
    assert queue.dequeue("session_1") is None
    assert queue.list_pending() == []


def test_queue_survives_a_new_instance(tmp_path):
    FileSubmissionQueue(tmp_path).enqueue("session/../x", {"v": 1})

    reopened = FileSubmissionQueue(tmp_path)

    assert reopened.list_pending() == ["session/../x"]
    assert reopened.load("session/../x") == {"v": 1}


def test_missing_directory_means_nothing_pending(tmp_path):
    assert FileSubmissionQueue(tmp_path / "nope").list_pending() == []
