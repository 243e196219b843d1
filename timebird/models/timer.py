"""Timer session model definitions."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class TimerState(str, Enum):
    """Stopwatch states."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class TimerSession(BaseModel):
    """Snapshot of the stopwatch."""

    state: TimerState = TimerState.IDLE
    is_active: bool = False
    start_time: str
    end_time: Optional[str] = None
