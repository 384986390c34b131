"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database. Tables are created before and dropped after
every test. The database is file-backed so that concurrent
tests can open several connections to it.
"""

import os

TEST_DATABASE_URL = "sqlite:///./test.db"
TEST_PASSWORD_SECRET = "test-password-secret"
TEST_JWT_SECRET = "test-jwt-secret"

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["PASSWORD_SECRET"] = TEST_PASSWORD_SECRET
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["ALLOWED_ORIGINS"] = "http://localhost:3000"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from savings_ledger.api.deps import get_password_hasher, get_token_service
from savings_ledger.main import app
from savings_ledger.models import Base, User, UserRole
from savings_ledger.models.base import engine_options, get_session_factory
from savings_ledger.models.enums import DeviceStatus
from savings_ledger.services.auth_service import AuthService
from savings_ledger.services.device_gate import DeviceGate
from savings_ledger.services.device_service import DeviceService
from savings_ledger.services.ledger_service import LedgerService
from savings_ledger.services.password_hasher import PasswordHasher
from savings_ledger.services.token_service import TokenService


engine = create_engine(
    TEST_DATABASE_URL,
    **engine_options(TEST_DATABASE_URL, statement_timeout_ms=10000),
)


@event.listens_for(engine, "connect")
def _sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    # Durability is irrelevant for a throwaway test database
    cursor.execute("PRAGMA synchronous=OFF")
    cursor.close()


TestSessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestSessionLocal


@pytest.fixture
def hasher():
    return PasswordHasher(TEST_PASSWORD_SECRET)


@pytest.fixture
def tokens():
    return TokenService(TEST_JWT_SECRET)


@pytest.fixture
def device_gate(session_factory):
    return DeviceGate(session_factory)


@pytest.fixture
def device_service(session_factory):
    return DeviceService(session_factory)


@pytest.fixture
def auth_service(session_factory, hasher, tokens, device_gate):
    return AuthService(session_factory, hasher, tokens, device_gate)


@pytest.fixture
def ledger_service(session_factory):
    return LedgerService(session_factory)


@pytest.fixture
def register_user(auth_service, device_service):
    """
    Factory fixture: register a customer and set the status of
    the device they registered with. Returns the user id.
    """
    def _register(
        email="jane@example.com",
        password="correct-horse",
        device_id="device-1",
        device_status=DeviceStatus.VERIFIED,
        full_name="Jane Saver",
    ):
        user = auth_service.register(email, full_name, password, device_id)
        if device_status != DeviceStatus.PENDING:
            device = device_service.list_for_user(user.id)[0]
            device_service.change_status(device.id, device_status)
        return user.id

    return _register


@pytest.fixture
def customer(register_user):
    """A registered customer with a verified device."""
    return register_user()


@pytest.fixture
def make_admin(session_factory):
    """Promote an existing user to ADMIN."""
    def _promote(user_id):
        with session_factory.begin() as db:
            db.get(User, user_id).role = UserRole.ADMIN
    return _promote


@pytest.fixture
def client(session_factory, hasher, tokens):
    """
    Provide a test client wired to the test database.

    The storage handle, hasher and token signer are swapped for
    the test instances through FastAPI dependency overrides.
    """
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_service] = lambda: tokens
    yield TestClient(app)
    app.dependency_overrides.clear()
