from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decode_json_column, fetchall
from .model import Student
from .repository import RosterRepository


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_students(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.person_id, p.name, p.id_number, p.face_id, p.face_descriptor, s.section_name
                FROM persons p
                JOIN student_sections ss ON ss.person_id = p.person_id
                JOIN sections s ON s.section_id = ss.section_id
                WHERE p.role = 'student' AND p.is_active = 1
                ORDER BY p.person_id
                """
            )
            rows = fetchall(cur)
            students = []
            for r in rows:
                descriptor = decode_json_column(r.get("face_descriptor"))
                students.append(
                    Student(
                        id=int(r["person_id"]),
                        name=r["name"],
                        id_number=str(r["id_number"]),
                        section_name=r["section_name"],
                        face_id=r.get("face_id"),
                        face_descriptor=tuple(float(v) for v in descriptor) if descriptor else None,
                    )
                )
            return students
