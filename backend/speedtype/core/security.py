import logging
from typing import Optional
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from speedtype.core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
)
from speedtype.core.database import get_session
from speedtype.core.errors import Unauthorized
from speedtype.models.models import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login", auto_error=False)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hashes a password using Argon2.

    Args:
        password (str): The plain text password.

    Returns:
        str: The hashed password.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies a plain password against a hashed password.

    Args:
        plain_password (str): The plain text password.
        hashed_password (str): The hashed password.

    Returns:
        bool: True if the password matches, False otherwise.
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """Creates a signed session token for an account.

    Args:
        user_id (str): The account identifier stored as the token subject.
        expires_minutes (Optional[int]): Lifetime override, mainly for tests.

    Returns:
        str: The encoded JWT string.
    """
    lifetime = (
        expires_minutes if expires_minutes is not None else ACCESS_TOKEN_EXPIRE_MINUTES
    )
    expire = datetime.now(timezone.utc) + timedelta(minutes=lifetime)
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Returns the account id held in a token.

    Raises:
        Unauthorized: If the token is malformed, badly signed or expired.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        raise Unauthorized("Not authorized, token failed")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Not authorized, token failed")
    return user_id


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    """Dependency to get the current authenticated user.

    Args:
        token (Optional[str]): The bearer token extracted from the request.
        session (Session): The database session.

    Returns:
        User: The authenticated user model.

    Raises:
        Unauthorized: If the token is missing, invalid, or the user does not exist.
    """
    if not token:
        raise Unauthorized("Not authorized, no token")

    user_id = decode_access_token(token)

    user = session.get(User, user_id)
    if user is None:
        raise Unauthorized("Not authorized, token failed")

    return user
