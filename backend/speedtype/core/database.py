import logging
from typing import Generator
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlmodel import SQLModel, create_engine, Session

from speedtype.core.config import DATABASE_URL

logger = logging.getLogger(__name__)

# pool_pre_ping: checks if the connection is alive before using it
engine = create_engine(DATABASE_URL, pool_pre_ping=True, echo=False)


def create_db_and_tables():
    """Creates the tables if they don't exist."""
    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    """Dependency for FastAPI to get a database session.

    Yields:
        Session: A SQLModel database session.
    """
    with Session(engine) as session:
        yield session


def ping(session: Session) -> bool:
    """Checks that the store answers a trivial query.

    Args:
        session (Session): The database session.

    Returns:
        bool: True if the store is reachable, False otherwise.
    """
    try:
        session.exec(text("SELECT 1"))
        return True
    except OperationalError as e:
        logger.warning("Database ping failed: %s", e)
        return False
