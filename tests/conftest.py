"""Shared test configuration and fixtures for Soapbox Portal tests"""

import logging
import os
import uuid
from pathlib import Path

from tests.config import test_config  # noqa: I001  (sets env before app import)

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from soapbox_portal.auth.dependencies import get_current_user
from soapbox_portal.auth.models import User
from soapbox_portal.main import app
from soapbox_portal.models.database import build_engine, get_db
from soapbox_portal.services.providers import get_blob_store, get_notifier
from soapbox_portal.services.registration_service import RegistrationService
from soapbox_portal.services.schemas import MemberInput, RegistrationForm
from tests.fakes import FakeBlobStore, FakeNotifier, SpyRepository

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test"""
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def _db_session(engine):
    """Private DB session for fixtures only.

    Prefer the `repository` and `registration_service` fixtures in tests.
    """
    session = Session(engine)
    yield session
    session.close()


@pytest.fixture
def repository(_db_session):
    return SpyRepository(_db_session)


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def registration_service(repository, blob_store, notifier):
    """RegistrationService wired to the test database and in-memory fakes"""
    return RegistrationService(repository, blob_store, notifier)


@pytest.fixture
def make_form():
    """Build a complete, valid RegistrationForm with optional overrides"""

    def _make_form(**overrides) -> RegistrationForm:
        values = {
            "team_name": "Rocket",
            "captain_name": "Alice",
            "email": "alice@example.com",
            "phone_number": "07700 900123",
            "age_range": "18+",
            "soapbox_name": "The Comet",
            "design_description": "Plywood shell on a steel frame",
            "dimensions": "2m x 1m x 0.8m",
            "brakes_steering": "Rope steering, friction brake on rear wheels",
            "terms_accepted": True,
        }
        values.update(overrides)
        return RegistrationForm(**values)

    return _make_form


@pytest.fixture
def alice_members():
    return [MemberInput(name="Alice", age=30)]


@pytest.fixture
def mock_current_user():
    """Create a team owner for testing authenticated endpoints"""

    def _create_mock_user(user_id=None, email="owner@example.com"):
        return User(
            user_id=user_id or f"auth0|{uuid.uuid4().hex}",
            email=email,
            claims={"iss": "https://soapbox-dev.eu.auth0.com/", "aud": "test-audience"},
        )

    return _create_mock_user


@pytest.fixture
def api_client(_db_session, blob_store, notifier):
    """Test client using the test database and fake capabilities.

    Yields (client, set_user) where set_user switches the signed-in owner.
    """
    original_overrides = app.dependency_overrides.copy()
    state = {"user": None}

    async def mock_get_current_user():
        return state["user"]

    def get_test_db():
        return _db_session

    def set_user(user):
        state["user"] = user

    app.dependency_overrides.clear()
    app.dependency_overrides[get_current_user] = mock_get_current_user
    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_notifier] = lambda: notifier

    client = TestClient(app)

    yield client, set_user

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": test_config["admin_api_key"]}


# PostgreSQL (optional: skipped when Docker is not available)


@pytest.fixture(scope="session")
def postgres_container():
    """Create a PostgreSQL test container for the test session"""
    try:
        from testcontainers.postgres import PostgresContainer

        container = PostgresContainer(test_config["postgres_image"])
        container.start()
    except Exception as e:
        pytest.skip(f"PostgreSQL container unavailable: {e}")

    try:
        _run_migrations(container.get_connection_url())
        yield container
    finally:
        container.stop()


def _run_migrations(database_url: str):
    """Run Alembic migrations on the test database"""
    from alembic import command
    from alembic.config import Config

    alembic_ini = Path(__file__).parent.parent / "alembic.ini"
    previous = os.environ.get("DATABASE_URL")
    os.environ["DATABASE_URL"] = database_url
    try:
        command.upgrade(Config(str(alembic_ini)), "head")
        logger.info("Database schema setup completed successfully")
    finally:
        if previous is None:
            os.environ.pop("DATABASE_URL", None)
        else:
            os.environ["DATABASE_URL"] = previous


@pytest.fixture(scope="session")
def postgres_engine(postgres_container):
    engine = build_engine(postgres_container.get_connection_url())
    yield engine
    engine.dispose()
