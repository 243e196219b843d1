"""Timer endpoints - stopwatch operations."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from timebird.dependencies import get_badge, get_time_entry_store, get_timer_service
from timebird.models.time_entry import Reference
from timebird.models.timer import TimerSession
from timebird.services.badge import BadgeIndicator
from timebird.services.time_entry_store import TimeEntryStore
from timebird.services.timer_service import TimerService


router = APIRouter(prefix="/timer", tags=["timer"])


class TimerStatus(TimerSession):
    """Timer snapshot plus the badge the shell should show."""

    badge_count: Optional[int] = None


class ClockTime(BaseModel):
    """Request model for setting a start or end time."""

    value: Optional[str] = None


class TimerSave(BaseModel):
    """Request model for saving the timer session as an entry."""

    description: str
    contact: Reference
    project: Reference
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    billable: Optional[bool] = None


class TimerSaveResult(BaseModel):
    """Outcome of saving the timer session."""

    saved: bool
    error: Optional[str] = None
    timer: TimerStatus


def status(timer: TimerService, badge: BadgeIndicator) -> TimerStatus:
    return TimerStatus(**timer.session.model_dump(), badge_count=badge.badge_count)


@router.get("", response_model=TimerStatus)
async def get_timer(
    timer: TimerService = Depends(get_timer_service),
    badge: BadgeIndicator = Depends(get_badge),
):
    """Get the current timer state."""
    return status(timer, badge)


@router.post("/start", response_model=TimerStatus)
async def start_timer(
    timer: TimerService = Depends(get_timer_service),
    badge: BadgeIndicator = Depends(get_badge),
):
    """
    Start the timer.

    - Starting a running timer changes nothing
    """
    await timer.start()
    return status(timer, badge)


@router.post("/stop", response_model=TimerStatus)
async def stop_timer(
    timer: TimerService = Depends(get_timer_service),
    badge: BadgeIndicator = Depends(get_badge),
):
    """
    Stop the timer and fix its end time.

    - Stopping a timer that is not running changes nothing
    """
    await timer.stop()
    return status(timer, badge)


@router.post("/reset", response_model=TimerStatus)
async def reset_timer(
    timer: TimerService = Depends(get_timer_service),
    badge: BadgeIndicator = Depends(get_badge),
):
    """Reset the timer to idle with the current time as start time."""
    await timer.reset()
    return status(timer, badge)


@router.put("/start-time", response_model=TimerStatus)
async def set_start_time(
    clock_time: ClockTime,
    timer: TimerService = Depends(get_timer_service),
    badge: BadgeIndicator = Depends(get_badge),
):
    """
    Set the start time (HH:MM).

    - Not allowed while the timer runs
    """
    if clock_time.value is None:
        raise HTTPException(status_code=400, detail="Start time is required")
    try:
        timer.set_start_time(clock_time.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return status(timer, badge)


@router.put("/end-time", response_model=TimerStatus)
async def set_end_time(
    clock_time: ClockTime,
    timer: TimerService = Depends(get_timer_service),
    badge: BadgeIndicator = Depends(get_badge),
):
    """
    Set or clear the end time (HH:MM).

    - Not allowed while the timer runs
    """
    try:
        timer.set_end_time(clock_time.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return status(timer, badge)


@router.post("/save", response_model=TimerSaveResult)
async def save_timer(
    timer_save: TimerSave,
    timer: TimerService = Depends(get_timer_service),
    badge: BadgeIndicator = Depends(get_badge),
    store: TimeEntryStore = Depends(get_time_entry_store),
):
    """
    Save the stopped timer session as a time entry.

    - Resets the timer when Moneybird accepts the entry
    - Store errors are returned in the result, not as HTTP errors
    """
    try:
        saved = await timer.save_time_entry(
            store,
            description=timer_save.description,
            contact=timer_save.contact,
            project=timer_save.project,
            start_date=timer_save.start_date,
            end_date=timer_save.end_date,
            billable=timer_save.billable,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return TimerSaveResult(
        saved=saved,
        error=None if saved else store.error,
        timer=status(timer, badge),
    )
