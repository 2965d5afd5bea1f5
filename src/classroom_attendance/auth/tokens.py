from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import AuthUser

JWT_ALGO = "HS256"


class TokenService:
    """Signs and verifies bearer tokens (PyJWT, HS256)."""

    def __init__(self, secret: str, *, ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS):
        self._secret = secret
        self._ttl = timedelta(hours=int(ttl_hours))

    def issue(self, user: AuthUser) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "username": user.username,
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGO)

    def verify(self, token: str) -> AuthUser:
        try:
            payload: Dict[str, Any] = jwt.decode(token, self._secret, algorithms=[JWT_ALGO])
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("Invalid or expired token") from e
        try:
            return AuthUser(username=str(payload["username"]), role=Role(payload["role"]))
        except (KeyError, ValueError) as e:
            raise AuthenticationError("Invalid or expired token") from e
