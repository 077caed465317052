from typing import List, Optional, Tuple
from sqlmodel import Session, select, func, or_
from speedtype.models.models import User, AttemptResult

RECENT_RESULTS_LIMIT = 5
LEADERBOARD_LIMIT = 10


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def find_existing_identity(
    session: Session, username: str, email: str
) -> Optional[User]:
    """Returns any account already holding the username or the email."""
    return session.exec(
        select(User).where(or_(User.username == username, User.email == email))
    ).first()


def lock_user(session: Session, user_id: str) -> Optional[User]:
    """Loads an account with a row lock held until the transaction ends.

    SQLite ignores FOR UPDATE; its writers are already serialized.
    The row is re-read so the aggregate reflects other committed attempts.
    """
    return session.exec(
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()


def get_result_by_attempt(
    session: Session, user_id: str, attempt_id: str
) -> Optional[AttemptResult]:
    return session.exec(
        select(AttemptResult)
        .where(AttemptResult.user_id == user_id)
        .where(AttemptResult.attempt_id == attempt_id)
    ).first()


def compute_aggregate(session: Session, user_id: str) -> Tuple[float, float, int]:
    """Folds every stored result of an account into its aggregate.

    Args:
        session (Session): The database session.
        user_id (str): The owning account.

    Returns:
        Tuple[float, float, int]: (best wpm, mean accuracy, attempt count),
            all zero when the account has no results.
    """
    best, mean, count = session.exec(
        select(
            func.max(AttemptResult.wpm),
            func.avg(AttemptResult.accuracy),
            func.count(AttemptResult.id),
        ).where(AttemptResult.user_id == user_id)
    ).one()
    return float(best or 0.0), float(mean or 0.0), int(count or 0)


def get_recent_results(
    session: Session, user_id: str, limit: int = RECENT_RESULTS_LIMIT
) -> List[AttemptResult]:
    statement = (
        select(AttemptResult)
        .where(AttemptResult.user_id == user_id)
        .order_by(AttemptResult.sequence.desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())


def get_top_users(session: Session, limit: int = LEADERBOARD_LIMIT) -> List[User]:
    """Returns ranked accounts that have at least one scoring attempt."""
    statement = (
        select(User)
        .where(User.best_wpm > 0)
        .order_by(User.best_wpm.desc(), User.created_at.asc())
        .limit(limit)
    )
    return list(session.exec(statement).all())
