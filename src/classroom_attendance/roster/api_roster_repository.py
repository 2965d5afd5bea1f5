from __future__ import annotations

from typing import Sequence

from ..core.exceptions import ApiError
from ..sync.api_client import ApiClient
from .model import Student
from .repository import RosterRepository


class ApiRosterRepository(RosterRepository):
    """Client-side roster loaded from GET /students."""

    def __init__(self, api: ApiClient):
        self._api = api

    def list_students(self) -> Sequence[Student]:
        body = self._api.get("/students")
        if "students" not in body:
            raise ApiError("Malformed /students response")
        return [Student.from_api(item) for item in body["students"]]
