import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_rental.sqlite3"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

TEST_DB_PATH = "./test_rental.sqlite3"


@pytest.fixture(autouse=True, scope="session")
def setup_test_db():
    import asyncio

    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    from app.database import create_tables, async_session
    from app.seed import seed_data

    async def _setup():
        await create_tables()
        async with async_session() as session:
            await seed_data(session)

    asyncio.run(_setup())
    yield
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture
def auth_headers():
    from app.models.user import User
    from app.services.auth_service import create_access_token

    user = User(id="test-user-id", email="test.user@example.com", role="USER")
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest_asyncio.fixture
async def api(auth_headers):
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers=auth_headers) as client:
        yield client


@pytest_asyncio.fixture
async def db_session():
    """Isolated in-memory database for service level tests."""
    from app.database import Base, enable_sqlite_foreign_keys
    from app.models import car, client, order, user  # noqa: F401

    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_sqlite_foreign_keys(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    await engine.dispose()
