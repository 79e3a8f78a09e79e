"""Shared test fixtures for the link store, notifier and FastAPI test client."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from commitlink.config import settings
from commitlink.db.session import get_db_session
from commitlink.dependencies import get_link_store, get_notifier
from commitlink.main import app
from commitlink.services.link_store import InMemoryLinkStore
from commitlink.services.notifier import InMemoryNotifier
from payloads import REPO_URL, TEAM_ID, WEBHOOK_SECRET


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only; the suite uses asyncio APIs directly."""
    return "asyncio"


@pytest.fixture(autouse=True)
def webhook_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Run every test with a configured webhook secret and no API key."""
    monkeypatch.setattr(settings, "github_webhook_secret", WEBHOOK_SECRET)
    monkeypatch.setattr(settings, "api_key", "")
    return WEBHOOK_SECRET


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Create a mock async database session.

    The mock's execute method returns successfully, simulating a healthy DB.
    """
    session = AsyncMock(spec=AsyncSession)
    session.execute.return_value = None
    return session


@pytest.fixture
def link_store() -> InMemoryLinkStore:
    """In-memory store seeded with one team and two tasks.

    Task 42 has two assignees and a creator who is not assigned; task 43 was
    created by its only assignee.
    """
    store = InMemoryLinkStore()
    store.add_team(TEAM_ID, "Synodos", REPO_URL)
    store.add_task(42, TEAM_ID, "Login page", created_by=100, assignees=[101, 102])
    store.add_task(43, TEAM_ID, "Signup form", created_by=101, assignees=[101])
    return store


@pytest.fixture
def notifier() -> InMemoryNotifier:
    """Create a fresh in-memory notifier for test inspection."""
    return InMemoryNotifier()


@pytest.fixture
async def client(
    mock_db_session: AsyncMock,
    link_store: InMemoryLinkStore,
    notifier: InMemoryNotifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with dependencies overridden.

    Uses the mock session so tests don't require a running database and the
    in-memory store and notifier so results can be inspected directly.
    """

    async def _override_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db_session  # type: ignore[misc]

    app.dependency_overrides[get_db_session] = _override_db_session
    app.dependency_overrides[get_link_store] = lambda: link_store
    app.dependency_overrides[get_notifier] = lambda: notifier
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
