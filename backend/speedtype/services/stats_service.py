"""
Account, attempt and leaderboard operations.

Routers call these functions with an open session; every failure is raised as
one of the errors in ``speedtype.core.errors``.
"""

import logging
from typing import Dict, Any, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from speedtype.core.errors import Conflict, InvalidCredentials, NotFound, Unauthorized
from speedtype.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
)
from speedtype.crud import crud
from speedtype.models.models import AttemptResult, Subscription, User
from speedtype.schemas.stats_models import RecentResult, ResultCreate
from speedtype.services.tiers import parse_tier

logger = logging.getLogger(__name__)

ACCURACY_DECIMALS = 1


def display_accuracy(value: float) -> float:
    """Rounds a mean accuracy for display."""
    return round(value, ACCURACY_DECIMALS)


def _summary(user: User) -> Dict[str, Any]:
    return {
        "username": user.username,
        "subscription": user.subscription,
        "wpm": user.best_wpm,
        "accuracy": display_accuracy(user.average_accuracy),
        "tests_taken": user.attempts_count,
    }


def _session_payload(user: User, message: str) -> Dict[str, Any]:
    return {
        "message": message,
        "user_id": user.id,
        "username": user.username,
        "subscription": user.subscription,
        "token": create_access_token(user.id),
    }


def create_account(
    session: Session, username: str, email: str, password: str
) -> Dict[str, Any]:
    """Registers a new account on the free tier with an empty aggregate.

    Args:
        session (Session): The database session.
        username (str): Desired unique handle.
        email (str): Unique email address.
        password (str): Plain text password, stored only as an Argon2 hash.

    Returns:
        Dict[str, Any]: Account id, handle, tier and a fresh session token.

    Raises:
        Conflict: If the handle or the email is already registered.
    """
    if crud.find_existing_identity(session, username, email):
        raise Conflict()

    user = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        subscription=Subscription.FREE,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration
        session.rollback()
        raise Conflict()
    session.refresh(user)

    logger.info("Registered account %s (%s)", user.username, user.id)
    return _session_payload(user, "User created successfully")


def authenticate(session: Session, email: str, password: str) -> Dict[str, Any]:
    """Checks credentials and issues a session token.

    Raises:
        InvalidCredentials: If the email is unknown or the password does not match.
    """
    user = crud.get_user_by_email(session, email)
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login for %s", email)
        raise InvalidCredentials()

    return _session_payload(user, "Login successful")


def record_attempt(
    session: Session, current_user: User, result: ResultCreate
) -> Dict[str, Any]:
    """Stores one attempt and folds it into the owner's aggregate.

    Each attempt gets the next per-account sequence number, which orders
    history independently of clock resolution.

    The insert and the aggregate update share one transaction, with the owner
    row locked first, so concurrent submissions for the same account are
    applied one after the other. The aggregate is recomputed from the stored
    results, which keeps ``best_wpm`` equal to the maximum and
    ``average_accuracy`` equal to the mean of all attempts.

    Args:
        session (Session): The database session.
        current_user (User): The account identified by the session token.
        result (ResultCreate): The validated attempt.

    Returns:
        Dict[str, Any]: ``result_id`` of the stored attempt and ``created``,
            False when the attempt id had already been recorded.

    Raises:
        Unauthorized: If the body names another account than the token.
    """
    if result.user_id != current_user.id:
        raise Unauthorized("Not authorized to record results for this user")

    if result.attempt_id:
        existing = crud.get_result_by_attempt(
            session, current_user.id, result.attempt_id
        )
        if existing:
            logger.info(
                "Duplicate attempt %s for %s ignored", result.attempt_id, current_user.id
            )
            return {"result_id": existing.id, "created": False}

    user = crud.lock_user(session, current_user.id)
    if user is None:
        raise Unauthorized("Not authorized, token failed")

    attempt = AttemptResult(
        user_id=user.id,
        attempt_id=result.attempt_id,
        sequence=user.attempts_count + 1,
        wpm=result.wpm,
        accuracy=result.accuracy,
        time_taken=result.time_taken,
        text_length=result.text_length,
    )
    session.add(attempt)
    try:
        session.flush()
    except IntegrityError:
        # Same attempt id committed by a concurrent request
        session.rollback()
        if not result.attempt_id:
            raise
        existing = crud.get_result_by_attempt(session, user.id, result.attempt_id)
        if existing is None:
            raise
        return {"result_id": existing.id, "created": False}

    user.best_wpm, user.average_accuracy, user.attempts_count = crud.compute_aggregate(
        session, user.id
    )
    session.add(user)
    session.commit()
    session.refresh(attempt)

    logger.info(
        "Recorded attempt %s for %s: %.0f wpm, %.0f%%",
        attempt.id,
        user.id,
        attempt.wpm,
        attempt.accuracy,
    )
    return {"result_id": attempt.id, "created": True}


def get_stats(session: Session, current_user: User, user_id: str) -> Dict[str, Any]:
    """Returns the aggregate of an account and its five most recent attempts.

    Raises:
        NotFound: If no account has this id.
        Unauthorized: If the account is not the caller's own.
    """
    user = session.get(User, user_id)
    if user is None:
        raise NotFound()
    if user.id != current_user.id:
        raise Unauthorized("Not authorized to view these stats")

    return {
        "user": _summary(user),
        "recent_results": [
            RecentResult.model_validate(r)
            for r in crud.get_recent_results(session, user.id)
        ],
    }


def get_leaderboard(session: Session) -> Dict[str, Any]:
    """Top ten accounts by best WPM, excluding accounts that never scored."""
    return {"users": [_summary(user) for user in crud.get_top_users(session)]}


def update_subscription(
    session: Session,
    current_user: User,
    user_id: str,
    subscription: Union[str, Subscription],
) -> Dict[str, Any]:
    """Changes the tier of the caller's own account.

    Raises:
        InvalidInput: If the tier name is not one of free, pro, trainer.
        NotFound: If no account has this id.
        Unauthorized: If the account is not the caller's own.
    """
    tier = parse_tier(subscription)

    user: Optional[User] = session.get(User, user_id)
    if user is None:
        raise NotFound()
    if user.id != current_user.id:
        raise Unauthorized("Not authorized to change this subscription")

    user.subscription = tier
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info("Account %s moved to %s", user.id, tier.value)
    return {"subscription": user.subscription}
