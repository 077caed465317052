from fastapi import APIRouter, Depends
from sqlmodel import Session

from speedtype.core.database import get_session
from speedtype.core.security import get_current_user
from speedtype.models.models import User
from speedtype.schemas.stats_models import (
    SubscriptionResponse,
    SubscriptionUpdate,
    UserStatsResponse,
)
from speedtype.services import stats_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
def get_user_stats(
    user_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Retrieves the aggregate stats and recent attempts of the caller's account.

    Args:
        user_id (str): The account to inspect; must be the caller's own.
        user (User): The current authenticated user.
        session (Session): The database session.

    Returns:
        UserStatsResponse: Aggregate plus the five most recent results, newest first.
    """
    return stats_service.get_stats(session, user, user_id)


@router.patch("/{user_id}/subscription", response_model=SubscriptionResponse)
def update_subscription(
    user_id: str,
    request: SubscriptionUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Changes the subscription tier of the caller's account."""
    return stats_service.update_subscription(
        session, user, user_id, request.subscription
    )
