"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from fastshift.app.main import app
from fastshift.app.db.session import Database, Base
from fastshift.app.db.store import DocumentStore
from fastshift.app.core.identity import SharedSecretIdentityProvider
from fastshift.app.models.common import utcnow
from fastshift.app.models.enums import UserRole, RiderStatus, RiderWorkStatus
from fastshift.app.models.user import User
from fastshift.app.models.rider import Rider
from fastshift.app.services.payment_gateway import PaymentGatewayClient

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET_KEY = "test-secret-key-with-at-least-32-characters"

identity_provider = SharedSecretIdentityProvider(TEST_SECRET_KEY)


def auth_headers(email: str) -> dict:
    """Authorization header for a principal with ``email``."""
    return {"Authorization": f"Bearer {identity_provider.create_access_token(email)}"}


class FakePaymentGateway(PaymentGatewayClient):
    def __init__(self):
        self.amounts = []
        self.error = None

    async def create_charge_intent(self, amount_in_cents: int) -> str:
        if self.error is not None:
            raise self.error
        self.amounts.append(amount_in_cents)
        return f"pi_test_{amount_in_cents}_secret"


@pytest.fixture
async def database():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db = Database(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield db

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def auth():
    return auth_headers


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
async def client(database, payment_gateway):
    """Async client for testing."""
    app.state.database = database
    app.state.identity_provider = identity_provider
    app.state.payment_gateway = payment_gateway
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fetch(database):
    """Read a document through a fresh session so the result reflects committed state."""
    async def _fetch(model, document_id):
        async with database.session_factory() as session:
            return await session.get(model, document_id)
    return _fetch


@pytest.fixture
def make_user(database):
    async def _make_user(email: str, role: UserRole = UserRole.USER, name: str = None) -> User:
        async with database.session_factory() as session:
            now = utcnow()
            return await DocumentStore(session).insert_one(User, {
                "email": email,
                "name": name,
                "role": role,
                "created_at": now,
                "last_logged_in": now,
                "details": {},
            })
    return _make_user


@pytest.fixture
def make_rider(database):
    async def _make_rider(
        email: str,
        status: RiderStatus = RiderStatus.ACTIVE,
        district: str = "Dhaka",
        name: str = "Test Rider"
    ) -> Rider:
        async with database.session_factory() as session:
            return await DocumentStore(session).insert_one(Rider, {
                "email": email,
                "name": name,
                "district": district,
                "status": status,
                "work_status": RiderWorkStatus.AVAILABLE,
                "details": {},
            })
    return _make_rider


@pytest.fixture
async def admin_headers(make_user):
    await make_user("admin@fastshift.test", UserRole.ADMIN, name="Admin")
    return auth_headers("admin@fastshift.test")
