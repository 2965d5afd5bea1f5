from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_username(self, username: str) -> Optional[User]:
        # Accounts may log in with their username or their id number.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT person_id, name, username, id_number, password_hash, role, is_active
                FROM persons
                WHERE username=%s OR id_number=%s
                ORDER BY username=%s DESC
                LIMIT 1
                """,
                (username, username, username),
            )
            r = fetchone(cur)
            if not r:
                return None
            return User(
                person_id=int(r["person_id"]),
                name=r["name"],
                username=r.get("username") or str(r["id_number"]),
                password_hash=r.get("password_hash"),
                role=Role(r["role"]),
                is_active=bool(r.get("is_active", 1)),
            )
