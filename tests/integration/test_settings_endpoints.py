"""Integration tests for settings endpoints."""
import json

import pytest


@pytest.mark.asyncio
class TestSettingsEndpoints:
    """Tests for reading and saving credentials."""

    async def test_get_settings_unconfigured(self, app_client):
        """Test empty settings."""
        response = await app_client.get("/settings")

        assert response.status_code == 200
        assert response.json() == {
            "api_token": "",
            "administration_id": "",
            "user_id": "",
            "configured": False,
        }

    async def test_save_settings(self, app_client, tmp_path, mock_client, make_entry):
        """Test saving credentials persists them and loads entries."""
        mock_client.list_time_entries.return_value = [make_entry("e1")]

        response = await app_client.put(
            "/settings",
            json={"api_token": "abcdef123456", "administration_id": "adm1", "user_id": "u1"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "api_token": "********3456",
            "administration_id": "adm1",
            "user_id": "u1",
            "configured": True,
        }
        assert json.loads((tmp_path / "store.json").read_text()) == {
            "apiToken": "abcdef123456",
            "administrationId": "adm1",
            "userId": "u1",
        }

        entries = await app_client.get("/time-entries")
        assert [e["id"] for e in entries.json()["time_entries"]] == ["e1"]

    async def test_save_settings_requires_fields(self, app_client):
        """Test the administration id is required."""
        response = await app_client.put("/settings", json={"user_id": "u1"})

        assert response.status_code == 422

    async def test_masked_token_round_trip_keeps_token(self, app_client, tmp_path, mock_client):
        """Test saving the form as loaded keeps the real token."""
        mock_client.list_time_entries.return_value = []
        await app_client.put(
            "/settings",
            json={"api_token": "secret-token-1234", "administration_id": "adm1", "user_id": "u1"},
        )

        loaded = (await app_client.get("/settings")).json()
        payload = {key: loaded[key] for key in ("api_token", "administration_id", "user_id")}
        response = await app_client.put("/settings", json=payload)

        assert response.status_code == 200
        assert response.json()["api_token"] == "*************1234"
        assert json.loads((tmp_path / "store.json").read_text())["apiToken"] == "secret-token-1234"

    async def test_omitted_token_keeps_token(self, app_client, configured_store, tmp_path, mock_client):
        """Test a form without a token only updates the ids."""
        mock_client.list_time_entries.return_value = []

        response = await app_client.put(
            "/settings", json={"administration_id": "adm2", "user_id": "u2"}
        )

        assert response.status_code == 200
        assert configured_store.api_token == "token123"
        assert configured_store.administration_id == "adm2"
        assert json.loads((tmp_path / "store.json").read_text())["apiToken"] == "token123"

    async def test_reset_settings(self, app_client, configured_store, tmp_path):
        """Test reset clears the credentials."""
        response = await app_client.delete("/settings")

        assert response.status_code == 200
        assert response.json()["configured"] is False
        assert json.loads((tmp_path / "store.json").read_text())["apiToken"] == ""


@pytest.mark.asyncio
class TestSettingsUsers:
    """Tests for the user picker."""

    async def test_list_users_with_form_values(self, app_client, mock_client):
        """Test unsaved credentials from the form are used."""
        from timebird.models.user import MoneybirdUser

        mock_client.list_users.return_value = [MoneybirdUser(id="u1", name="Ada")]

        response = await app_client.post(
            "/settings/users",
            json={"api_token": "token123", "administration_id": "adm1"},
        )

        assert response.status_code == 200
        assert response.json() == [{"id": "u1", "name": "Ada"}]
        mock_client.list_users.assert_awaited_once_with("token123", "adm1")

    async def test_list_users_unconfigured(self, app_client, mock_client):
        """Test no credentials gives an empty list."""
        response = await app_client.post("/settings/users")

        assert response.json() == []
        mock_client.list_users.assert_not_called()

    async def test_list_users_with_stored_credentials(self, app_client, configured_store, mock_client):
        """Test the stored credentials are used without a body."""
        mock_client.list_users.return_value = []

        response = await app_client.post("/settings/users")

        assert response.status_code == 200
        mock_client.list_users.assert_awaited_once_with("token123", "adm1")
