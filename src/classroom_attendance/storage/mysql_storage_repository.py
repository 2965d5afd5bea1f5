from __future__ import annotations

from typing import Dict, Sequence

from ..common.datetime_utils import to_mysql
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SessionInfo, SummaryRow
from .repository import AttendanceStore


def _dt(value):
    return to_mysql(value) if value is not None else None


class MySQLAttendanceStore(AttendanceStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def resolve_person_ids(self, id_numbers: Sequence[str]) -> Dict[str, int]:
        wanted = sorted({str(n) for n in id_numbers if n})
        if not wanted:
            return {}

        placeholders = ", ".join(["%s"] * len(wanted))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT person_id, id_number FROM persons WHERE id_number IN ({placeholders})",
                tuple(wanted),
            )
            return {str(r["id_number"]): int(r["person_id"]) for r in fetchall(cur)}

    def save_submission(self, session: SessionInfo, rows: Sequence[SummaryRow]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_sessions
                    (session_id, subject, section_id, video_source, start_time, end_time, total_captures)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    subject=VALUES(subject),
                    section_id=VALUES(section_id),
                    video_source=VALUES(video_source),
                    start_time=VALUES(start_time),
                    end_time=VALUES(end_time),
                    total_captures=VALUES(total_captures)
                """,
                (
                    session.session_id,
                    session.subject,
                    session.section_id,
                    session.video_source,
                    _dt(session.start_time),
                    _dt(session.end_time),
                    session.total_captures,
                ),
            )

            for row in rows:
                attendance_id = self._upsert_summary(cur, row)
                if row.events:
                    cur.executemany(
                        """
                        INSERT IGNORE INTO face_detection_log
                            (face_attendance_id, detection_index, confidence, detected_at)
                        VALUES (%s, %s, %s, %s)
                        """,
                        [
                            (attendance_id, e.detection_index, round(e.confidence, 4), _dt(e.detected_at))
                            for e in row.events
                        ],
                    )
            return len(rows)

    @staticmethod
    def _upsert_summary(cur, row: SummaryRow) -> int:
        # LAST_INSERT_ID(expr) makes lastrowid point at the existing row on update.
        cur.execute(
            """
            INSERT INTO face_attendance
                (session_id, person_id, detection_count, confidence_avg, confidence_min, confidence_max,
                 first_detected_at, last_detected_at, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE
                face_attendance_id=LAST_INSERT_ID(face_attendance_id),
                detection_count=VALUES(detection_count),
                confidence_avg=VALUES(confidence_avg),
                confidence_min=VALUES(confidence_min),
                confidence_max=VALUES(confidence_max),
                first_detected_at=VALUES(first_detected_at),
                last_detected_at=VALUES(last_detected_at),
                status=VALUES(status)
            """,
            (
                row.session_id,
                row.person_id,
                row.detection_count,
                round(row.confidence_avg, 4),
                round(row.confidence_min, 4),
                round(row.confidence_max, 4),
                _dt(row.first_detected_at),
                _dt(row.last_detected_at),
                row.status.value,
            ),
        )
        return int(cur.lastrowid)
