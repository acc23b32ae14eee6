"""Shared fixtures for approval-desk backend tests."""

import os

# Point the app at SQLite before any approvaldesk module builds its engine.
TEST_DB_URL = "sqlite+aiosqlite:///./test.db"
os.environ.setdefault("DATABASE_URL", TEST_DB_URL)
os.environ.setdefault("NOTIFICATION_BACKEND", "log")

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from approvaldesk.core.database import get_db  # noqa: E402
from approvaldesk.main import app  # noqa: E402
from approvaldesk.models.base import Base  # noqa: E402
from approvaldesk.models.request_type import RequestType  # noqa: E402
from approvaldesk.models.user import User  # noqa: E402
from approvaldesk.notifications.dispatcher import NotificationDispatcher, NotificationEvent  # noqa: E402
from approvaldesk.workflow.engine import WorkflowEngine  # noqa: E402

engine_test = create_async_engine(TEST_DB_URL, echo=False, poolclass=NullPool)
TestSession = async_sessionmaker(engine_test, class_=AsyncSession, expire_on_commit=False)


class RecordingDispatcher(NotificationDispatcher):
    """Keeps every dispatched event in memory instead of sending it."""

    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []

    def dispatch(self, event: NotificationEvent) -> None:
        self.events.append(event)


@pytest_asyncio.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSession() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def workflow(dispatcher: RecordingDispatcher) -> WorkflowEngine:
    return WorkflowEngine(TestSession, dispatcher)


@pytest_asyncio.fixture
async def client(workflow: WorkflowEngine) -> AsyncGenerator[AsyncClient, None]:
    # ASGITransport skips the lifespan, so wire the engine by hand.
    app.state.workflow_engine = workflow
    transport = ASGITransport(app=app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSession() as session:
        yield session


@pytest_asyncio.fixture
async def directory() -> dict[str, int]:
    """Users 1-3 and request types 1-2, the way the seed script lays them out."""
    async with TestSession() as session:
        session.add_all(
            [
                User(id=1, username="john.doe", full_name="John Doe", email="john.doe@example.com"),
                User(id=2, username="jane.smith", full_name="Jane Smith", email="jane.smith@example.com"),
                User(id=3, username="ana.gomez", full_name="Ana Gomez", email=None),
                RequestType(id=1, name="DEPLOYMENT", description="Deployment request"),
                RequestType(id=2, name="ACCESS", description=None),
            ]
        )
        await session.commit()
    return {"requester": 1, "approver": 2, "no_email": 3, "deployment": 1, "access": 2}
