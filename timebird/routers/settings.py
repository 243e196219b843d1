"""Settings endpoints - Moneybird credentials."""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from timebird.dependencies import get_time_entry_store
from timebird.models.credentials import CredentialsUpdate, CredentialsView
from timebird.models.user import MoneybirdUser
from timebird.services.time_entry_store import TimeEntryStore


router = APIRouter(prefix="/settings", tags=["settings"])


class UserLookup(BaseModel):
    """Unsaved credentials from the settings form."""

    api_token: Optional[str] = None
    administration_id: Optional[str] = None


@router.get("", response_model=CredentialsView)
async def get_settings(store: TimeEntryStore = Depends(get_time_entry_store)):
    """Get the stored credentials with the API token masked."""
    return CredentialsView.from_credentials(store.credentials)


@router.put("", response_model=CredentialsView)
async def save_settings(
    credentials: CredentialsUpdate,
    store: TimeEntryStore = Depends(get_time_entry_store),
):
    """
    Save credentials and reload entries.

    - Fields are saved one at a time
    - The stored token is kept when api_token is omitted or still masked
    """
    await store.configure(
        credentials.resolve_token(store.api_token),
        credentials.administration_id,
        credentials.user_id,
    )
    return CredentialsView.from_credentials(store.credentials)


@router.delete("", response_model=CredentialsView)
async def reset_settings(store: TimeEntryStore = Depends(get_time_entry_store)):
    """Clear all stored credentials."""
    await store.reset_credentials()
    return CredentialsView.from_credentials(store.credentials)


@router.post("/users", response_model=list[MoneybirdUser])
async def list_users(
    lookup: Optional[UserLookup] = None,
    store: TimeEntryStore = Depends(get_time_entry_store),
):
    """
    List users of the administration for the user picker.

    - Unsaved credentials from the settings form go in the body, never the URL
    - Without a body the stored credentials are used
    - Returns an empty list when Moneybird cannot be reached
    """
    lookup = lookup or UserLookup()
    return await store.list_users(lookup.api_token, lookup.administration_id)
