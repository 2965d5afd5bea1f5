from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Backend account (a row of ``persons`` with a password hash)."""

    person_id: int
    name: str
    username: str
    password_hash: Optional[str]
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class AuthUser:
    username: str
    role: Role

    def to_api(self) -> dict:
        return {"username": self.username, "role": self.role.value}


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: AuthUser
    via_demo_fallback: bool = False
