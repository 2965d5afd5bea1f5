from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Tuple

from ..core.enums import Role


@dataclass(frozen=True)
class DemoCredentials:
    """Fixed offline-demo logins, kept apart from real authentication.

    Accepted pairs: ``teacher``/``teach123`` and ``numeric_id`` as both username
    and password.
    """

    numeric_id: str = "2500032073"
    teacher_pair: Tuple[str, str] = ("teacher", "teach123")
    role: Role = Role.TEACHER

    def matches(self, username: str, password: str) -> bool:
        given_user = (username or "").encode("utf-8")
        given_pass = (password or "").encode("utf-8")
        pairs = (self.teacher_pair, (self.numeric_id, self.numeric_id))
        return any(
            hmac.compare_digest(given_user, u.encode("utf-8")) and hmac.compare_digest(given_pass, p.encode("utf-8"))
            for u, p in pairs
            if u
        )
