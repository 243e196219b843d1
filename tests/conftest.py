"""Pytest configuration and fixtures."""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from timebird.main import app
from timebird.models.time_entry import Reference, TimeEntry
from timebird.services.badge import BadgeIndicator
from timebird.services.credential_store import SettingsStore
from timebird.services.moneybird_client import MoneybirdClient
from timebird.services.time_entry_store import TimeEntryStore
from timebird.services.timer_service import TimerService


class FakeClock:
    """Clock returning a settable local time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    """Clock frozen at 2024-01-01 09:00 local time."""
    return FakeClock(datetime(2024, 1, 1, 9, 0))


@pytest.fixture
def settings_store(tmp_path):
    """Settings store backed by a temporary file."""
    return SettingsStore(tmp_path / "store.json")


@pytest.fixture
def mock_client():
    """Moneybird client with every call mocked."""
    return AsyncMock(spec=MoneybirdClient)


@pytest.fixture
def make_entry():
    """Factory for entries as the Moneybird client returns them."""

    def _make(entry_id="e1", description="Design review", minutes=150):
        started_at = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        return TimeEntry(
            id=entry_id,
            description=description,
            contact=Reference(id="c1", name="Acme"),
            project=Reference(id="p1", name="Website"),
            started_at=started_at,
            ended_at=started_at + timedelta(minutes=minutes),
            url=f"https://moneybird.com/adm1/time_entries/{entry_id}",
        )

    return _make


@pytest.fixture
def entry_data():
    """Valid manual entry payload."""
    return {
        "description": "Design review",
        "contact": {"id": "c1", "name": "Acme"},
        "project": {"id": "p1", "name": "Website"},
        "started_at": "2024-01-01T09:00:00Z",
        "ended_at": "2024-01-01T11:30:00Z",
    }


@pytest.fixture
def store(settings_store, mock_client):
    """Unconfigured time entry store."""
    return TimeEntryStore(settings_store, mock_client)


@pytest.fixture
def configured_store(store):
    """Time entry store holding credentials."""
    store.api_token = "token123"
    store.administration_id = "adm1"
    store.user_id = "u1"
    store.initialized = True
    return store


@pytest_asyncio.fixture
async def timer(clock):
    """Timer with a fast tick, reset after the test."""
    timer = TimerService(busy_indicator=BadgeIndicator(), clock=clock, tick_interval=0.01)
    yield timer
    await timer.reset()


@pytest_asyncio.fixture
async def app_client(store, timer):
    """
    Create a test client wired to test services.

    This fixture:
    - Replaces the services built by the lifespan with test instances
    - Yields an async HTTP client for testing
    """
    app.state.badge = timer.busy_indicator
    app.state.time_entry_store = store
    app.state.timer_service = timer

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client
