"""Timer service - stopwatch state for building time entries."""
import asyncio
import contextlib
import logging
from datetime import date, datetime
from typing import Callable, Optional, Protocol

from timebird.models.time_entry import Reference
from timebird.models.timer import TimerSession, TimerState
from timebird.services.time_entry_store import TimeEntryStore
from timebird.utils.timestamps import entry_span, format_hhmm, normalize_hhmm

logger = logging.getLogger(__name__)


class BusyIndicator(Protocol):
    """Host capability that shows the timer is running (e.g. a dock badge)."""

    def notify_busy(self) -> None: ...

    def clear_busy(self) -> None: ...


class NullBusyIndicator:
    """Busy indicator for hosts without one."""

    def notify_busy(self) -> None:
        pass

    def clear_busy(self) -> None:
        pass


class TimerService:
    """
    Stopwatch with idle, running and stopped states.

    While running, a single asyncio task refreshes end_time from the clock
    every tick interval. Leaving the running state always cancels that task
    before returning.
    """

    def __init__(
        self,
        busy_indicator: Optional[BusyIndicator] = None,
        clock: Callable[[], datetime] = datetime.now,
        tick_interval: float = 1.0,
    ):
        """
        Initialize an idle timer starting at the current clock time.

        Args:
            busy_indicator: Host busy indicator, notified on start and cleared on stop
            clock: Returns the current local time
            tick_interval: Seconds between end time refreshes
        """
        self.busy_indicator = busy_indicator or NullBusyIndicator()
        self.clock = clock
        self.tick_interval = tick_interval

        self.state = TimerState.IDLE
        self.start_time = format_hhmm(self.clock())
        self.end_time: Optional[str] = None
        self._tick_task: Optional[asyncio.Task] = None

    @property
    def is_active(self) -> bool:
        return self.state == TimerState.RUNNING

    @property
    def session(self) -> TimerSession:
        """Current timer snapshot."""
        return TimerSession(
            state=self.state,
            is_active=self.is_active,
            start_time=self.start_time,
            end_time=self.end_time,
        )

    async def start(self) -> None:
        """Start the stopwatch. Does nothing if it is already running."""
        if self.state == TimerState.RUNNING:
            return

        self.end_time = None
        self.state = TimerState.RUNNING
        self._tick_task = asyncio.create_task(self._run_ticks())
        self.busy_indicator.notify_busy()
        logger.info("Timer started at %s", self.start_time)

    def tick(self) -> None:
        """Refresh end_time from the clock while running."""
        if self.state != TimerState.RUNNING:
            return
        self.end_time = format_hhmm(self.clock())

    async def _run_ticks(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.tick()

    async def _cancel_ticks(self) -> None:
        task, self._tick_task = self._tick_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def stop(self) -> None:
        """Stop the stopwatch and fix end_time. Does nothing unless running."""
        if self.state != TimerState.RUNNING:
            return

        await self._cancel_ticks()
        # a reset may have run while the tick task was cancelled
        if self.state != TimerState.RUNNING:
            return
        self.end_time = format_hhmm(self.clock())
        self.state = TimerState.STOPPED
        self.busy_indicator.clear_busy()
        logger.info("Timer stopped at %s", self.end_time)

    async def reset(self) -> None:
        """Return to idle with a fresh start time."""
        await self._cancel_ticks()
        self.state = TimerState.IDLE
        self.start_time = format_hhmm(self.clock())
        self.end_time = None
        self.busy_indicator.clear_busy()
        logger.debug("Timer reset")

    def set_start_time(self, value: str) -> None:
        """
        Override the start time.

        Raises:
            ValueError: If the timer is running or value is not HH:MM
        """
        if self.state == TimerState.RUNNING:
            raise ValueError("Start time cannot be changed while the timer is running")
        self.start_time = normalize_hhmm(value)

    def set_end_time(self, value: Optional[str]) -> None:
        """
        Override or clear the end time.

        Raises:
            ValueError: If the timer is running or value is not HH:MM
        """
        if self.state == TimerState.RUNNING:
            raise ValueError("End time is set by the running timer")
        if value is None:
            self.end_time = None
            return
        self.end_time = normalize_hhmm(value)

    async def save_time_entry(
        self,
        store: TimeEntryStore,
        description: str,
        contact: Reference,
        project: Reference,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        billable: Optional[bool] = None,
    ) -> bool:
        """
        Submit the current session as a time entry and reset on success.

        Args:
            store: Store that submits the entry
            description: What was worked on
            contact: Contact reference
            project: Project reference
            start_date: Optional start date (defaults to today)
            end_date: Optional end date, required together with start_date
            billable: Optional billable flag

        Returns:
            True if the entry was created, False if the store rejected it

        Raises:
            ValueError: If the timer is running, has no end time, or the dates are incomplete
        """
        if self.state == TimerState.RUNNING:
            raise ValueError("Stop the timer before saving")
        if not self.end_time:
            raise ValueError("Start and end times are required")

        started_at, ended_at = entry_span(
            self.start_time,
            self.end_time,
            start_date=start_date,
            end_date=end_date,
            today=self.clock().date(),
        )

        entry = {
            "description": description,
            "contact": contact.model_dump(),
            "project": project.model_dump(),
            "started_at": started_at,
            "ended_at": ended_at,
        }
        if billable is not None:
            entry["billable"] = billable
        if store.user_id:
            entry["user_id"] = store.user_id

        created = await store.add_time_entry(entry)
        if created is None:
            logger.warning("Failed to save time entry: %s", store.error)
            return False

        await self.reset()
        return True
