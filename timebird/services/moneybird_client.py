"""Moneybird API client - remote time entry operations."""
import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from timebird.exceptions import RemoteServiceError
from timebird.models.time_entry import Reference, TimeEntry, TimeEntryCreate, TimeEntryUpdate
from timebird.models.user import MoneybirdUser

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def format_timestamp(moment: datetime) -> str:
    """
    Format a timestamp the way Moneybird expects it.

    Naive datetimes are taken as local time.

    Example:
        >>> format_timestamp(datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc))
        '2024-01-01 09:00:00 UTC'
    """
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def contact_display_name(contact: dict) -> str:
    """Company name, falling back to the contact person's name."""
    if contact.get("company_name"):
        return contact["company_name"]
    names = (contact.get("firstname"), contact.get("lastname"))
    return " ".join(name for name in names if name)


def to_wire(fields: dict[str, Any]) -> dict[str, Any]:
    """Translate dumped model fields to a Moneybird time_entry body."""
    body = {}
    for key, value in fields.items():
        if key in ("contact", "project"):
            body[f"{key}_id"] = value["id"] if value else None
        elif key in ("started_at", "ended_at"):
            body[key] = format_timestamp(value) if value else None
        else:
            body[key] = value
    return body


class MoneybirdClient:
    """Stateless client for the Moneybird time entries API."""

    def __init__(self, http: httpx.AsyncClient, web_url: str = "https://moneybird.com"):
        """
        Initialize client.

        Args:
            http: HTTP client with base_url set to the Moneybird API root
            web_url: Moneybird web root used for entry deep links
        """
        self.http = http
        self.web_url = web_url.rstrip("/")

    async def _request(self, method: str, token: str, path: str, **kwargs) -> Any:
        """
        Send an authenticated request and decode the JSON response.

        Raises:
            RemoteServiceError: On non-2xx responses, transport errors or invalid JSON
        """
        try:
            response = await self.http.request(
                method,
                path,
                headers={"Authorization": f"Bearer {token}"},
                **kwargs,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("Moneybird %s %s returned HTTP %d", method, path, status)
            raise RemoteServiceError(f"Moneybird returned HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.warning("Moneybird %s %s failed: %s", method, path, e)
            raise RemoteServiceError(f"Could not reach Moneybird: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError("Moneybird returned invalid JSON") from e

    def _to_entry(self, doc: dict, administration_id: str) -> TimeEntry:
        """Convert a Moneybird time entry document to a TimeEntry."""
        entry_id = str(doc["id"])

        contact = doc.get("contact")
        if contact:
            contact_ref = Reference(id=str(contact["id"]), name=contact_display_name(contact))
        elif doc.get("contact_id"):
            contact_ref = Reference(id=str(doc["contact_id"]))
        else:
            contact_ref = None

        project = doc.get("project")
        if project:
            project_ref = Reference(id=str(project["id"]), name=project.get("name") or "")
        elif doc.get("project_id"):
            project_ref = Reference(id=str(doc["project_id"]))
        else:
            project_ref = None

        return TimeEntry(
            id=entry_id,
            description=doc.get("description") or "",
            contact=contact_ref,
            project=project_ref,
            started_at=doc["started_at"],
            ended_at=doc["ended_at"],
            billable=doc.get("billable"),
            user_id=str(doc["user_id"]) if doc.get("user_id") else None,
            url=f"{self.web_url}/{administration_id}/time_entries/{entry_id}",
        )

    def _parse_entry(self, doc: Any, administration_id: str) -> TimeEntry:
        try:
            return self._to_entry(doc, administration_id)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed time entry from Moneybird: %s", e)
            raise RemoteServiceError("Moneybird returned a malformed time entry") from e

    async def list_time_entries(
        self,
        token: str,
        administration_id: str,
        per_page: int = 20,
    ) -> list[TimeEntry]:
        """
        Fetch the most recent time entries.

        Args:
            token: API token
            administration_id: Administration ID
            per_page: Number of entries to fetch

        Returns:
            Time entries in the order Moneybird returns them

        Raises:
            RemoteServiceError: If the request fails
        """
        docs = await self._request(
            "GET",
            token,
            f"/{administration_id}/time_entries.json",
            params={"per_page": per_page, "page": 1},
        )
        if not isinstance(docs, list):
            raise RemoteServiceError("Moneybird returned a malformed time entry list")

        return [self._parse_entry(doc, administration_id) for doc in docs]

    async def create_time_entry(
        self,
        token: str,
        administration_id: str,
        entry: TimeEntryCreate,
    ) -> TimeEntry:
        """
        Create a time entry.

        Args:
            token: API token
            administration_id: Administration ID
            entry: Entry to create

        Returns:
            Entry as stored by Moneybird, with its assigned id

        Raises:
            RemoteServiceError: If the request fails
        """
        body = to_wire(entry.model_dump(exclude_none=True))
        doc = await self._request(
            "POST",
            token,
            f"/{administration_id}/time_entries.json",
            json={"time_entry": body},
        )
        return self._parse_entry(doc, administration_id)

    async def update_time_entry(
        self,
        token: str,
        administration_id: str,
        entry_id: str,
        entry_update: TimeEntryUpdate,
    ) -> TimeEntry:
        """
        Update a time entry with only the fields set on entry_update.

        Args:
            token: API token
            administration_id: Administration ID
            entry_id: Time entry ID
            entry_update: Fields to change

        Returns:
            Entry as stored by Moneybird after the update

        Raises:
            RemoteServiceError: If the request fails
        """
        body = to_wire(entry_update.model_dump(exclude_unset=True))
        doc = await self._request(
            "PATCH",
            token,
            f"/{administration_id}/time_entries/{entry_id}.json",
            json={"time_entry": body},
        )
        return self._parse_entry(doc, administration_id)

    async def list_users(self, token: str, administration_id: str) -> list[MoneybirdUser]:
        """
        Fetch the users of an administration.

        Raises:
            RemoteServiceError: If the request fails
        """
        docs = await self._request("GET", token, f"/{administration_id}/users.json")
        try:
            return [
                MoneybirdUser(id=str(doc["id"]), name=doc.get("name") or doc.get("email") or "")
                for doc in docs
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteServiceError("Moneybird returned a malformed user list") from e
