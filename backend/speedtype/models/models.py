from enum import Enum
from typing import Optional, List
from uuid import uuid4
from sqlmodel import SQLModel, Field, Relationship, UniqueConstraint
from datetime import datetime, timezone


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subscription(str, Enum):
    """Subscription tiers an account can hold."""

    FREE = "free"
    PRO = "pro"
    TRAINER = "trainer"


class User(SQLModel, table=True):
    """Represents a registered account and its rolling aggregate."""

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    subscription: Subscription = Field(default=Subscription.FREE)

    # --- AGGREGATE (maintained by the stats service) ---
    best_wpm: float = Field(default=0.0, index=True)
    average_accuracy: float = Field(default=0.0)
    attempts_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=_utcnow)

    results: List["AttemptResult"] = Relationship(back_populates="user")


class AttemptResult(SQLModel, table=True):
    """One finished or timed-out typing attempt. Never updated once stored."""

    __tablename__ = "attempt_result"
    __table_args__ = (
        UniqueConstraint("user_id", "attempt_id"),
        UniqueConstraint("user_id", "sequence"),
    )

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="user.id", index=True)
    # Client-generated key used to drop duplicate submissions
    attempt_id: Optional[str] = Field(default=None, max_length=64)
    # Per-account attempt number, assigned under the owner row lock
    sequence: int = Field(default=0)
    wpm: float
    accuracy: float
    time_taken: float
    text_length: int
    created_at: datetime = Field(default_factory=_utcnow, index=True)

    user: Optional[User] = Relationship(back_populates="results")
