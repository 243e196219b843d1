"""Service accessors for route dependencies."""
from fastapi import Request

from timebird.services.badge import BadgeIndicator
from timebird.services.time_entry_store import TimeEntryStore
from timebird.services.timer_service import TimerService


def get_time_entry_store(request: Request) -> TimeEntryStore:
    """Dependency to get the time entry store built at startup."""
    return request.app.state.time_entry_store


def get_timer_service(request: Request) -> TimerService:
    """Dependency to get the timer built at startup."""
    return request.app.state.timer_service


def get_badge(request: Request) -> BadgeIndicator:
    """Dependency to get the badge indicator built at startup."""
    return request.app.state.badge
