"""Time entry endpoints - recent entries from Moneybird."""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from timebird.dependencies import get_time_entry_store
from timebird.models.time_entry import TimeEntry
from timebird.services.time_entry_store import TimeEntryStore


router = APIRouter(prefix="/time-entries", tags=["time-entries"])


class TimeEntriesState(BaseModel):
    """Entry list together with the store's status flags."""

    time_entries: list[TimeEntry]
    is_loading: bool
    error: Optional[str] = None
    configured: bool


def snapshot(store: TimeEntryStore) -> TimeEntriesState:
    return TimeEntriesState(
        time_entries=store.time_entries,
        is_loading=store.is_loading,
        error=store.error,
        configured=store.is_configured,
    )


@router.get("", response_model=TimeEntriesState)
async def list_entries(store: TimeEntryStore = Depends(get_time_entry_store)):
    """
    Get the entries currently held by the client.

    - Most recent first, as returned by Moneybird
    """
    return snapshot(store)


@router.post("/refresh", response_model=TimeEntriesState)
async def refresh_entries(store: TimeEntryStore = Depends(get_time_entry_store)):
    """
    Reload the most recent entries from Moneybird.

    - On failure the previous list is kept and error is set
    """
    await store.fetch_time_entries()
    return snapshot(store)


@router.post("", response_model=TimeEntriesState)
async def create_entry(
    entry: dict[str, Any] = Body(...),
    store: TimeEntryStore = Depends(get_time_entry_store),
):
    """
    Create a time entry from the manual entry form.

    - Invalid entries are rejected before contacting Moneybird
    - The created entry is prepended to the list
    """
    await store.add_time_entry(entry)
    return snapshot(store)


@router.patch("/{entry_id}", response_model=TimeEntriesState)
async def update_entry(
    entry_id: str,
    entry_update: dict[str, Any] = Body(...),
    store: TimeEntryStore = Depends(get_time_entry_store),
):
    """
    Update the given fields of a time entry.

    - The entry is replaced in place when present in the list
    """
    await store.update_time_entry(entry_id, entry_update)
    return snapshot(store)
