import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import Database
from app.main import create_app
from app.services.auth import AuthService
from app.services.finance import FinanceService


@pytest.fixture
def settings(tmp_path):
    """Each test gets its own SQLite file so concurrent sessions really are separate connections."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'finance_tracker.db'}",
        SECRET_KEY="test-secret-key-that-is-long-enough-for-hs256",
        STORE_TIMEOUT_SECONDS=10.0,
        CREATE_TABLES_ON_STARTUP=True,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def database(settings):
    db = Database(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database):
    async with database.sessionmaker() as session:
        yield session


@pytest.fixture
def auth_service(db_session, settings):
    return AuthService(db_session, settings)


@pytest.fixture
def finance_service(db_session, settings):
    return FinanceService(db_session, store_timeout=settings.STORE_TIMEOUT_SECONDS)


@pytest.fixture
async def alice(auth_service):
    return await auth_service.register("alice", "alice@example.com", "secret123")


@pytest.fixture
async def bob(auth_service):
    return await auth_service.register("bob", "bob@example.com", "hunter22")


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
