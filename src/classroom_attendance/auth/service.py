from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthenticationError
from .demo_credentials import DemoCredentials
from .model import AuthUser, LoginResult
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate (login) and issue a bearer token.

    Backend-verified accounts are checked first; the demo fallback is only
    consulted when one is configured.
    """

    def __init__(self, users: UserRepository, tokens: TokenService, *, demo: Optional[DemoCredentials] = None):
        self._users = users
        self._tokens = tokens
        self._demo = demo

    def authenticate(self, username: str, password: str) -> LoginResult:
        username = (username or "").strip()
        if not username or not password:
            raise AuthenticationError("Invalid credentials")

        user = self._verify_backend(username, password)
        if user is not None:
            return LoginResult(token=self._tokens.issue(user), user=user)

        if self._demo is not None and self._demo.matches(username, password):
            logger.warning("Demo fallback login used for %s", username)
            demo_user = AuthUser(username=username, role=self._demo.role)
            return LoginResult(token=self._tokens.issue(demo_user), user=demo_user, via_demo_fallback=True)

        raise AuthenticationError("Invalid credentials")

    def _verify_backend(self, username: str, password: str) -> Optional[AuthUser]:
        account = self._users.get_by_username(username)
        if not account or not account.is_active or not account.password_hash:
            return None
        try:
            ok = check_password_hash(account.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False
        if not ok:
            return None
        return AuthUser(username=account.username, role=account.role)

    def verify_token(self, token: str) -> AuthUser:
        return self._tokens.verify(token)
