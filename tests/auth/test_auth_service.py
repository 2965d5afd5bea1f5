from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import jwt
import pytest
from werkzeug.security import generate_password_hash

from classroom_attendance.auth.demo_credentials import DemoCredentials
from classroom_attendance.auth.model import User
from classroom_attendance.auth.service import AuthService
from classroom_attendance.auth.tokens import TokenService
from classroom_attendance.core.enums import Role
from classroom_attendance.core.exceptions import AuthenticationError


@dataclass
class InMemoryUsers:
    users: dict[str, User]

    def get_by_username(self, username: str) -> Optional[User]:
        return self.users.get(username)


def _users():
    return InMemoryUsers(
        {
            "instructor": User(
                person_id=1,
                name="Instructor",
                username="instructor",
                password_hash=generate_password_hash("instructor123"),
                role=Role.TEACHER,
            ),
            "retired": User(
                person_id=2,
                name="Retired",
                username="retired",
                password_hash=generate_password_hash("pw"),
                role=Role.TEACHER,
                is_active=False,
            ),
            "legacy": User(person_id=3, name="Legacy", username="legacy", password_hash="CHANGE_ME", role=Role.ADMIN),
        }
    )


def test_backend_login_issues_verifiable_token():
    tokens = TokenService("secret", ttl_hours=1)
    svc = AuthService(_users(), tokens)

    result = svc.authenticate("instructor", "instructor123")

    assert result.via_demo_fallback is False
    assert result.user.to_api() == {"username": "instructor", "role": "teacher"}
    assert svc.verify_token(result.token) == result.user


@pytest.mark.parametrize(
    "username,password",
    [("instructor", "wrong"), ("retired", "pw"), ("legacy", "CHANGE_ME"), ("nobody", "x"), ("", "x"), ("instructor", "")],
)
def test_bad_credentials_rejected(username, password):
    svc = AuthService(_users(), TokenService("secret"))

    with pytest.raises(AuthenticationError):
        svc.authenticate(username, password)


@pytest.mark.parametrize("username,password", [("teacher", "teach123"), ("2500032073", "2500032073")])
def test_demo_fallback_only_when_enabled(username, password):
    tokens = TokenService("secret")

    with pytest.raises(AuthenticationError):
        AuthService(_users(), tokens).authenticate(username, password)

    result = AuthService(_users(), tokens, demo=DemoCredentials()).authenticate(username, password)
    assert result.via_demo_fallback is True
    assert result.user.role == Role.TEACHER


def test_demo_credentials_do_not_mix_pairs():
    demo = DemoCredentials()

    assert not demo.matches("teacher", "2500032073")
    assert not demo.matches("2500032073", "teach123")
    assert not demo.matches("", "")


def test_tampered_or_expired_token_rejected():
    tokens = TokenService("secret", ttl_hours=1)
    forged = jwt.encode({"username": "x", "role": "teacher"}, "other-secret", algorithm="HS256")
    expired = jwt.encode({"username": "x", "role": "teacher", "exp": 1}, "secret", algorithm="HS256")

    for token in (forged, expired, "garbage"):
        with pytest.raises(AuthenticationError):
            tokens.verify(token)
