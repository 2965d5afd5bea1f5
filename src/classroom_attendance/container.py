from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.demo_credentials import DemoCredentials
from .auth.mysql_user_repository import MySQLUserRepository
from .auth.repository import UserRepository
from .auth.service import AuthService
from .auth.tokens import TokenService
from .database.connection import DBConfig, DatabaseConnection
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .roster.service import RosterService
from .storage.mysql_storage_repository import MySQLAttendanceStore
from .storage.repository import AttendanceStore
from .storage.service import AttendanceStorageService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    roster_repo: RosterRepository
    storage_repo: AttendanceStore

    tokens: TokenService
    auth_service: AuthService
    roster_service: RosterService
    storage_service: AttendanceStorageService

    require_auth: bool = False


def build_container(*, db_config: dict, settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    roster_repo = MySQLRosterRepository(conn)
    storage_repo = MySQLAttendanceStore(conn)

    tokens = TokenService(str(settings.JWT_SECRET), ttl_hours=int(settings.TOKEN_TTL_HOURS))
    demo = DemoCredentials(numeric_id=str(settings.DEMO_NUMERIC_ID)) if settings.ALLOW_DEMO_LOGIN else None

    return Container(
        conn=conn,
        users_repo=users_repo,
        roster_repo=roster_repo,
        storage_repo=storage_repo,
        tokens=tokens,
        auth_service=AuthService(users_repo, tokens, demo=demo),
        roster_service=RosterService(roster_repo),
        storage_service=AttendanceStorageService(storage_repo),
        require_auth=bool(settings.REQUIRE_AUTH),
    )
