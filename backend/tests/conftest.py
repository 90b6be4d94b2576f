"""Shared test fixtures."""

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import pathwise.models  # noqa: F401  (register tables)
from pathwise.clients.tutor_api import TutorApiClient
from pathwise.core.database import Base
from pathwise.schemas.identity import SessionIdentity

TUTOR_BASE_URL = "http://tutor.test"

TutorHandler = Callable[[httpx.Request], httpx.Response]


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(test_engine, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session


@pytest.fixture
def alice() -> SessionIdentity:
    return SessionIdentity(email="alice@example.com", name="Alice")


@pytest.fixture
def bob() -> SessionIdentity:
    return SessionIdentity(email="bob@example.com", name="Bob")


@pytest.fixture
def tutor_client_factory() -> Callable[[TutorHandler], TutorApiClient]:
    """Build tutor clients whose HTTP traffic is answered by a handler."""

    def factory(handler: TutorHandler) -> TutorApiClient:
        return TutorApiClient(TUTOR_BASE_URL, timeout=5.0, transport=httpx.MockTransport(handler))

    return factory
