"""
Pydantic schemas for registration and login.
"""

import re
from pydantic import EmailStr, Field, field_validator

from speedtype.models.models import Subscription
from .common import CamelModel

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,30}$")
MIN_PASSWORD_LENGTH = 6


class RegisterRequest(CamelModel):
    """Schema for account registration."""

    username: str
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username must be 3-30 letters, digits, underscores or hyphens"
            )
        return v


class LoginRequest(CamelModel):
    """Schema for login by email."""

    email: EmailStr
    password: str


class AuthResponse(CamelModel):
    """Returned by both register and login.

    Attributes:
        message (str): Human readable outcome.
        user_id (str): Opaque account identifier.
        username (str): Account handle.
        subscription (Subscription): Current tier.
        token (str): Signed bearer token.
    """

    message: str
    user_id: str
    username: str
    subscription: Subscription
    token: str
