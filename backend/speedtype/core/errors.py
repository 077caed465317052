"""
Error taxonomy shared by the service layer and the HTTP handlers.
"""

from typing import Any, Dict, Optional


class SpeedTypeError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.detail = detail if detail is not None else self.default_detail
        self.headers = headers
        super().__init__(str(self.detail))


class Conflict(SpeedTypeError):
    """Duplicate identity at registration."""

    status_code = 400
    default_detail = "User already exists with this email or username"


class Unauthorized(SpeedTypeError):
    """Missing, invalid or expired session token, or a foreign account."""

    status_code = 401
    default_detail = "Not authorized"

    def __init__(self, detail: Any = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredentials(Unauthorized):
    """Login failure. Reported as 400 on the login route."""

    status_code = 400
    default_detail = "Invalid credentials"


class NotFound(SpeedTypeError):
    status_code = 404
    default_detail = "User not found"


class InvalidInput(SpeedTypeError):
    status_code = 400
    default_detail = "Invalid input"


class ServiceUnavailable(SpeedTypeError):
    """The persistent store cannot be reached."""

    status_code = 503
    default_detail = "Service degraded: database unavailable"
