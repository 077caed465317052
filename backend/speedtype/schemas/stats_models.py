"""
Pydantic schemas for attempt results, per-account stats and the leaderboard.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field

from speedtype.models.models import Subscription
from .common import CamelModel

# A countdown never exceeds one minute
MAX_TIME_TAKEN = 60


class ResultCreate(CamelModel):
    """Body of a Record Attempt request.

    ``attempt_id`` is generated by the client so a resent request can be
    recognised and dropped.
    """

    user_id: str
    wpm: float = Field(ge=0)
    accuracy: float = Field(ge=0, le=100)
    time_taken: float = Field(ge=0, le=MAX_TIME_TAKEN)
    text_length: int = Field(ge=1)
    attempt_id: Optional[str] = Field(default=None, min_length=1, max_length=64)


class ResultCreated(CamelModel):
    message: str = "Result saved successfully"
    result_id: str


class RecentResult(CamelModel):
    """One entry of a user's recent history."""

    id: str
    wpm: float
    accuracy: float
    time_taken: float
    text_length: int
    created_at: datetime


class UserSummary(CamelModel):
    """Aggregate view of an account.

    Attributes:
        wpm (float): Best words-per-minute across all attempts.
        accuracy (float): Mean accuracy across all attempts, one decimal.
        tests_taken (int): Number of recorded attempts.
    """

    username: str
    subscription: Subscription
    wpm: float
    accuracy: float
    tests_taken: int


class UserStatsResponse(CamelModel):
    user: UserSummary
    recent_results: List[RecentResult]


class LeaderboardEntry(UserSummary):
    pass


class LeaderboardResponse(CamelModel):
    users: List[LeaderboardEntry]


class SubscriptionUpdate(CamelModel):
    subscription: str


class SubscriptionResponse(CamelModel):
    message: str = "Subscription updated successfully"
    subscription: Subscription
