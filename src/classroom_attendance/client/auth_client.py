from __future__ import annotations

import logging
from typing import Optional

from ..auth.demo_credentials import DemoCredentials
from ..auth.model import AuthUser
from ..core.enums import Role
from ..core.exceptions import ApiError, AuthenticationError
from ..sync.api_client import ApiClient

logger = logging.getLogger(__name__)


class AuthClient:
    """Client-side login against POST /login.

    When the API rejects or cannot be reached, the demo credentials (if
    configured) still let the teacher run a session, just without a token.
    """

    def __init__(self, api: ApiClient, *, demo: Optional[DemoCredentials] = None):
        self._api = api
        self._demo = demo
        self.user: Optional[AuthUser] = None

    def login(self, username: str, password: str) -> AuthUser:
        try:
            body = self._api.post("/login", {"username": username, "password": password})
            if not body.get("success") or not body.get("token"):
                raise ApiError(str(body.get("error") or "Login failed"))
            user_data = body.get("user") or {}
            user = AuthUser(
                username=str(user_data.get("username") or username),
                role=Role(user_data.get("role") or Role.TEACHER.value),
            )
            self._api.set_token(str(body["token"]))
        except (ApiError, ValueError) as e:
            if self._demo is None or not self._demo.matches(username, password):
                raise AuthenticationError(f"Login failed: {e}") from e
            logger.warning("API login failed (%s); continuing with demo credentials", e)
            self._api.set_token(None)
            user = AuthUser(username=username, role=self._demo.role)

        self.user = user
        logger.info("Logged in as %s (%s)", user.username, user.role.value)
        return user

    def logout(self) -> None:
        self._api.set_token(None)
        self.user = None
