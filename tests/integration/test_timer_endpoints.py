"""Integration tests for timer endpoints."""
import pytest
from datetime import datetime


@pytest.mark.asyncio
class TestTimerLifecycle:
    """Tests for starting, stopping and resetting the timer."""

    async def test_get_timer_idle(self, app_client):
        """Test a fresh timer is idle."""
        response = await app_client.get("/timer")

        assert response.status_code == 200
        assert response.json() == {
            "state": "idle",
            "is_active": False,
            "start_time": "09:00",
            "end_time": None,
            "badge_count": None,
        }

    async def test_start_and_stop_timer(self, app_client, clock):
        """Test the timer runs, shows the badge, and stops."""
        response = await app_client.post("/timer/start")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "running"
        assert data["is_active"] is True
        assert data["badge_count"] == 1

        clock.now = datetime(2024, 1, 1, 10, 30)
        response = await app_client.post("/timer/stop")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "stopped"
        assert data["is_active"] is False
        assert data["end_time"] == "10:30"
        assert data["badge_count"] is None

    async def test_start_twice(self, app_client):
        """Test starting a running timer keeps it running."""
        await app_client.post("/timer/start")
        response = await app_client.post("/timer/start")

        assert response.status_code == 200
        assert response.json()["is_active"] is True

    async def test_stop_idle_timer(self, app_client):
        """Test stopping an idle timer is harmless."""
        response = await app_client.post("/timer/stop")

        assert response.status_code == 200
        assert response.json()["state"] == "idle"

    async def test_reset_timer(self, app_client, clock):
        """Test reset returns to idle with a fresh start time."""
        await app_client.post("/timer/start")
        clock.now = datetime(2024, 1, 1, 13, 5)

        response = await app_client.post("/timer/reset")

        data = response.json()
        assert data["state"] == "idle"
        assert data["start_time"] == "13:05"
        assert data["end_time"] is None


@pytest.mark.asyncio
class TestTimerManualTimes:
    """Tests for editing timer times."""

    async def test_set_start_and_end_time(self, app_client):
        """Test times can be edited while idle."""
        response = await app_client.put("/timer/start-time", json={"value": "8:30"})
        assert response.status_code == 200
        assert response.json()["start_time"] == "08:30"

        response = await app_client.put("/timer/end-time", json={"value": "12:00"})
        assert response.status_code == 200
        assert response.json()["end_time"] == "12:00"

        response = await app_client.put("/timer/end-time", json={"value": None})
        assert response.json()["end_time"] is None

    async def test_set_end_time_while_running(self, app_client):
        """Test the end time cannot be edited while running."""
        await app_client.post("/timer/start")

        response = await app_client.put("/timer/end-time", json={"value": "12:00"})

        assert response.status_code == 400
        assert "running timer" in response.json()["detail"]

    async def test_set_invalid_start_time(self, app_client):
        """Test malformed times are rejected."""
        response = await app_client.put("/timer/start-time", json={"value": "noon"})

        assert response.status_code == 400
        assert "HH:MM" in response.json()["detail"]

    async def test_set_start_time_missing_value(self, app_client):
        """Test a start time cannot be cleared."""
        response = await app_client.put("/timer/start-time", json={})

        assert response.status_code == 400


@pytest.mark.asyncio
class TestTimerSave:
    """Tests for saving the timer session."""

    async def test_save_timer_session(self, app_client, clock, configured_store, mock_client, make_entry):
        """Test a stopped session becomes an entry and the timer resets."""
        mock_client.create_time_entry.return_value = make_entry("e9")

        await app_client.post("/timer/start")
        clock.now = datetime(2024, 1, 1, 11, 30)
        await app_client.post("/timer/stop")

        response = await app_client.post(
            "/timer/save",
            json={
                "description": "Design review",
                "contact": {"id": "c1", "name": "Acme"},
                "project": {"id": "p1", "name": "Website"},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["saved"] is True
        assert data["error"] is None
        assert data["timer"]["state"] == "idle"
        assert [e.id for e in configured_store.time_entries] == ["e9"]

    async def test_save_timer_session_unconfigured(self, app_client, mock_client):
        """Test saving without credentials reports the store error."""
        await app_client.put("/timer/end-time", json={"value": "10:00"})

        response = await app_client.post(
            "/timer/save",
            json={
                "description": "Design review",
                "contact": {"id": "c1"},
                "project": {"id": "p1"},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["saved"] is False
        assert data["error"] == "API token and administration ID are required"
        assert data["timer"]["end_time"] == "10:00"
        mock_client.create_time_entry.assert_not_called()

    async def test_save_running_timer(self, app_client):
        """Test a running timer cannot be saved."""
        await app_client.post("/timer/start")

        response = await app_client.post(
            "/timer/save",
            json={
                "description": "Design review",
                "contact": {"id": "c1"},
                "project": {"id": "p1"},
            },
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Stop the timer before saving"
