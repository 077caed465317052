from fastapi import APIRouter, Depends
from sqlmodel import Session

from speedtype.core.database import get_session
from speedtype.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from speedtype.services import stats_service

router = APIRouter(tags=["Authentication"])


@router.post("/register", status_code=201, response_model=AuthResponse)
def register(user: RegisterRequest, session: Session = Depends(get_session)):
    """Registers a new account and logs it in.

    Args:
        user (RegisterRequest): The registration data.
        session (Session): The database session.

    Returns:
        AuthResponse: The new account id, handle, tier and session token.

    Raises:
        Conflict: If the username or email is already taken.
    """
    return stats_service.create_account(
        session, user.username, str(user.email), user.password
    )


@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, session: Session = Depends(get_session)):
    """Authenticates an account by email and returns a session token.

    Args:
        credentials (LoginRequest): Email and password.
        session (Session): The database session.

    Returns:
        AuthResponse: The account id, handle, tier and session token.

    Raises:
        InvalidCredentials: If authentication fails.
    """
    return stats_service.authenticate(
        session, str(credentials.email), credentials.password
    )
