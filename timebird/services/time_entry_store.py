"""Time entry store - in-memory entries and credential state."""
import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from timebird.exceptions import CredentialStoreError, RemoteServiceError
from timebird.models.credentials import Credentials
from timebird.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from timebird.models.user import MoneybirdUser
from timebird.services.credential_store import (
    ADMINISTRATION_ID_KEY,
    API_TOKEN_KEY,
    USER_ID_KEY,
    SettingsStore,
)
from timebird.services.moneybird_client import MoneybirdClient

logger = logging.getLogger(__name__)

CREDENTIALS_REQUIRED = "API token and administration ID are required"


def validation_message(error: ValidationError) -> str:
    """First validation error as a readable message."""
    first = error.errors()[0]
    return first["msg"].removeprefix("Value error, ")


class TimeEntryStore:
    """
    Holds the recent time entries and the Moneybird credentials.

    Failures never raise out of the public operations. They are reported
    through `error` and leave the entry list at its last good state.
    Overlapping operations are not serialized; the last one to finish
    decides the list contents.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        client: MoneybirdClient,
        page_size: int = 20,
    ):
        """Initialize store with its persistence and remote collaborators."""
        self.settings_store = settings_store
        self.client = client
        self.page_size = page_size

        self.api_token = ""
        self.administration_id = ""
        self.user_id = ""

        self.time_entries: list[TimeEntry] = []
        self.is_loading = False
        self.error: Optional[str] = None
        self.initialized = False

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            api_token=self.api_token,
            administration_id=self.administration_id,
            user_id=self.user_id,
        )

    @property
    def is_configured(self) -> bool:
        return self.credentials.is_configured

    async def initialize(self) -> None:
        """
        Load credentials and fetch entries when configured.

        Runs once; later calls return immediately.
        """
        if self.initialized:
            return
        self.initialized = True

        try:
            self.api_token = await self.settings_store.get(API_TOKEN_KEY) or ""
            self.administration_id = await self.settings_store.get(ADMINISTRATION_ID_KEY) or ""
            self.user_id = await self.settings_store.get(USER_ID_KEY) or ""
        except CredentialStoreError:
            logger.exception("Failed to load settings")
            self.error = "Failed to load settings"
            return

        logger.info("Settings loaded (configured=%s)", self.is_configured)
        if self.is_configured:
            await self.fetch_time_entries()

    async def _persist(self, key: str, attribute: str, value: str, label: str) -> bool:
        try:
            await self.settings_store.set(key, value)
            await self.settings_store.save()
        except CredentialStoreError:
            logger.exception("Failed to save %s", label)
            self.error = f"Failed to save {label}"
            return False

        setattr(self, attribute, value)
        return True

    async def set_api_token(self, token: str) -> bool:
        """Persist the API token, then adopt it. Returns False on failure."""
        return await self._persist(API_TOKEN_KEY, "api_token", token, "API token")

    async def set_administration_id(self, administration_id: str) -> bool:
        """Persist the administration ID, then adopt it. Returns False on failure."""
        return await self._persist(
            ADMINISTRATION_ID_KEY, "administration_id", administration_id, "administration ID"
        )

    async def set_user_id(self, user_id: str) -> bool:
        """Persist the user ID, then adopt it. Returns False on failure."""
        return await self._persist(USER_ID_KEY, "user_id", user_id, "user ID")

    async def configure(self, api_token: str, administration_id: str, user_id: str = "") -> None:
        """
        Save all three credentials and reload entries.

        Each field is saved on its own, so a failure part way leaves the
        earlier fields updated.
        """
        saved = (
            await self.set_api_token(api_token)
            and await self.set_administration_id(administration_id)
            and await self.set_user_id(user_id)
        )
        if saved and self.is_configured:
            await self.fetch_time_entries()

    async def reset_credentials(self) -> None:
        """Clear all three credentials."""
        await self.set_api_token("")
        await self.set_administration_id("")
        await self.set_user_id("")

    def _require_credentials(self) -> bool:
        if not self.is_configured:
            self.error = CREDENTIALS_REQUIRED
            return False
        return True

    async def fetch_time_entries(self) -> None:
        """Replace the entry list with the most recent entries."""
        if not self._require_credentials():
            return

        self.is_loading = True
        self.error = None
        try:
            entries = await self.client.list_time_entries(
                self.api_token, self.administration_id, per_page=self.page_size
            )
        except RemoteServiceError:
            logger.exception("Failed to fetch time entries")
            self.error = "Failed to fetch time entries"
        else:
            self.time_entries = entries
            logger.debug("Fetched %d time entries", len(entries))
        finally:
            self.is_loading = False

    async def add_time_entry(
        self, entry: Union[TimeEntryCreate, dict[str, Any]]
    ) -> Optional[TimeEntry]:
        """
        Create an entry and prepend it to the list.

        Args:
            entry: Entry model or mapping, validated before any remote call

        Returns:
            Created entry, or None on failure
        """
        if not self._require_credentials():
            return None

        try:
            data = entry.model_dump() if isinstance(entry, TimeEntryCreate) else entry
            entry = TimeEntryCreate.model_validate(data)
        except ValidationError as e:
            self.error = f"Invalid time entry: {validation_message(e)}"
            return None

        self.is_loading = True
        self.error = None
        try:
            created = await self.client.create_time_entry(
                self.api_token, self.administration_id, entry
            )
        except RemoteServiceError:
            logger.exception("Failed to create time entry")
            self.error = "Failed to create time entry"
            return None
        finally:
            self.is_loading = False

        logger.info("Created time entry %s (%s)", created.id, created.time)
        self.time_entries = [created, *self.time_entries]
        return created

    async def update_time_entry(
        self,
        entry_id: str,
        entry_update: Union[TimeEntryUpdate, dict[str, Any]],
    ) -> Optional[TimeEntry]:
        """
        Update an entry remotely and replace it in the list.

        The remote call is made even if the id is not in the list; the
        replacement is then a no-op.

        Returns:
            Updated entry, or None on failure
        """
        if not self._require_credentials():
            return None

        if not isinstance(entry_update, TimeEntryUpdate):
            try:
                entry_update = TimeEntryUpdate.model_validate(entry_update)
            except ValidationError as e:
                self.error = f"Invalid time entry: {validation_message(e)}"
                return None

        self.is_loading = True
        self.error = None
        try:
            updated = await self.client.update_time_entry(
                self.api_token, self.administration_id, entry_id, entry_update
            )
        except RemoteServiceError:
            logger.exception("Failed to update time entry %s", entry_id)
            self.error = "Failed to update time entry"
            return None
        finally:
            self.is_loading = False

        self.time_entries = [
            updated if existing.id == entry_id else existing for existing in self.time_entries
        ]
        return updated

    async def list_users(
        self,
        api_token: Optional[str] = None,
        administration_id: Optional[str] = None,
    ) -> list[MoneybirdUser]:
        """
        List administration users for the user picker.

        Uses the given credentials, falling back to the stored ones.
        Returns an empty list when unconfigured or on failure.
        """
        token = api_token or self.api_token
        admin_id = administration_id or self.administration_id
        if not (token and admin_id):
            return []

        try:
            return await self.client.list_users(token, admin_id)
        except RemoteServiceError:
            logger.warning("Failed to list users for administration %s", admin_id)
            return []
