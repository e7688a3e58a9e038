"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import make_url

from src.config import Settings
from src.database import Base, Database, get_db
from src.main import create_app
from src.services.auth import CredentialHasher, TokenService

TEST_JWT_SECRET = "test-secret-key-with-enough-length-0123456789"  # noqa: S105


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


def to_test_database_url(url: str) -> str:
    """Point a database URL at its `_test` sibling database, leaving credentials alone."""
    parsed = make_url(url)
    return parsed.set(database=f"{parsed.database}_test").render_as_string(hide_password=False)


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = to_test_database_url(os.getenv("DATABASE_URL"))
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

test_database = Database(SQLALCHEMY_DATABASE_URL)


@pytest.fixture(scope="session")
def settings():
    """Settings for tests; cheap bcrypt rounds keep the suite fast."""
    return Settings(
        jwt_secret=TEST_JWT_SECRET,
        database_url=SQLALCHEMY_DATABASE_URL,
        bcrypt_rounds=4,
        environment="test",
        create_tables=False,
    )


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    test_database.create_all()
    yield
    test_database.dispose()


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = test_database.session_factory()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def hasher(settings):
    return CredentialHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def token_service(settings):
    return TokenService(settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture(scope="function")
def app(settings):
    return create_app(settings=settings, database=test_database)


@pytest.fixture(scope="function")
def client(app, db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Factory that signs up a user and returns auth headers carrying their id."""

    def _register(email: str, password: str = "testpass123", name: str = "Test User"):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        return AuthHeaders(
            {"Authorization": f"Bearer {data['access_token']}"},
            user_id=data["user"]["id"],
            email=data["user"]["email"],
        )

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Create a user and return auth headers with user info."""
    return register_user("test@example.com")


@pytest.fixture
def other_auth_headers(register_user):
    """A second, unrelated user."""
    return register_user("other@example.com", name="Other User")
