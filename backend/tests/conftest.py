import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool
import sys
import os

# Append sys.path to ensure the below imports work from tests folder
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set environment variables for testing before importing the app
os.environ["JWT_SECRET_KEY"] = "test_secret_key_for_pytest"
os.environ.setdefault("DATABASE_URL", "sqlite://")

from speedtype.main import app
from speedtype.core.database import get_session

# Create in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
)


# Define a fixture to override database dependency
@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    """Creates a fresh in-memory database session for each test.

    Yields:
        Session: The SQLModel session connected to the test database.
    """
    # Create the tables in the test DB
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session

    # Tear down (drop tables) after test is done
    SQLModel.metadata.drop_all(engine)


# Define test client fixture
@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    """Creates a TestClient with the database dependency overridden.

    Args:
        session (Session): The test database session.

    Yields:
        TestClient: The FastAPI test client.
    """

    # Override the get_session dependency so the app uses SQLite test database
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override

    client = TestClient(app)
    yield client

    # Clean up overrides
    app.dependency_overrides.clear()


def register(
    client: TestClient,
    username: str = "ana",
    email: str = "ana@example.com",
    password: str = "pw123456",
) -> Dict[str, str]:
    """Registers an account and returns the response body."""
    response = client.post(
        "/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="account")
def account_fixture(client: TestClient) -> Dict[str, str]:
    """A freshly registered account with its token."""
    return register(client)
