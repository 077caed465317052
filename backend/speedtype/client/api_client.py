"""
HTTP client for the SpeedType API.

Mirrors the routes one method each and keeps the bearer token issued by
register/login on the instance.
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class ApiError(Exception):
    """Raised for any non-2xx response or transport failure.

    Attributes:
        status (int): HTTP status, or 0 when no response was received.
        detail (Any): The server's ``detail`` field, if any.
        path (str): The request path.
    """

    def __init__(self, status: int, detail: Any = None, path: str = ""):
        self.status = status
        self.detail = detail
        self.path = path
        super().__init__(f"{status} {path}: {detail}")

    @property
    def user_message(self) -> str:
        """Message suitable for a form.

        Authentication failures and duplicate registrations are shown as the
        server worded them; everything else becomes a generic retry notice.
        """
        auth_route = self.path in ("/register", "/login")
        if (self.status == 401 or (self.status == 400 and auth_route)) and isinstance(
            self.detail, str
        ):
            return self.detail
        return GENERIC_ERROR_MESSAGE


class SpeedTypeClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.http = session or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

    def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiError(0, str(e), path) from e

        if not response.ok:
            try:
                detail = response.json().get("detail")
            except (ValueError, AttributeError):
                detail = response.text
            raise ApiError(response.status_code, detail, path)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(response.status_code, "Malformed response body", path) from e

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST",
            "/register",
            {"username": username, "email": email, "password": password},
        )
        self.token = data["token"]
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/login", {"email": email, "password": password})
        self.token = data["token"]
        return data

    def save_result(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/results", payload)

    def get_user_stats(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/users/{user_id}/stats")

    def update_subscription(self, user_id: str, subscription: str) -> Dict[str, Any]:
        return self._request(
            "PATCH", f"/users/{user_id}/subscription", {"subscription": subscription}
        )

    def get_leaderboard(self) -> Dict[str, Any]:
        return self._request("GET", "/leaderboard")
