from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..core.constants import DEFAULT_HTTP_TIMEOUT
from ..core.exceptions import ApiError

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin JSON client for the attendance API.

    The bearer token is optional; requests without one are still sent.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self.token: Optional[str] = None

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self._base_url}{endpoint}"
        try:
            response = self._session.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("API call failed: %s %s (%s)", method, endpoint, e)
            raise ApiError(f"{method} {endpoint} failed: {e}") from e

        if not response.ok:
            logger.error("API call failed: %s %s -> HTTP %s", method, endpoint, response.status_code)
            raise ApiError(f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(f"{method} {endpoint} returned invalid JSON", status_code=response.status_code) from e

        if not isinstance(body, dict):
            raise ApiError(f"{method} {endpoint} returned unexpected JSON", status_code=response.status_code)
        return body

    def get(self, endpoint: str) -> Dict[str, Any]:
        return self.request("GET", endpoint)

    def post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", endpoint, payload)
