"""Helpers for the HH:MM clock strings used by the timer and entry form."""
from datetime import date, datetime, time
from typing import Optional

CLOCK_FORMAT = "%H:%M"


def format_hhmm(moment: datetime) -> str:
    """
    Format a datetime as a local HH:MM clock string.

    Example:
        >>> format_hhmm(datetime(2024, 1, 1, 9, 5, 42))
        '09:05'
    """
    return moment.strftime(CLOCK_FORMAT)


def parse_hhmm(value: str) -> time:
    """
    Parse an HH:MM clock string.

    Args:
        value: Clock string such as "09:30"

    Returns:
        Time of day

    Raises:
        ValueError: If the value is not a valid HH:MM string
    """
    try:
        return datetime.strptime(value.strip(), CLOCK_FORMAT).time()
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")


def combine(day: date, clock: str) -> datetime:
    """Combine a calendar date and HH:MM into a local timezone-aware datetime."""
    return datetime.combine(day, parse_hhmm(clock)).astimezone()


def entry_span(
    start_time: str,
    end_time: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> tuple[datetime, datetime]:
    """
    Build the absolute start and end timestamps of an entry.

    Without explicit dates both ends fall on today, so a session that
    crosses midnight ends up on a single calendar day.

    Args:
        start_time: Start clock time (HH:MM)
        end_time: End clock time (HH:MM)
        start_date: Optional start date
        end_date: Optional end date, required together with start_date
        today: Date used when no dates are given (defaults to local today)

    Returns:
        (started_at, ended_at) as timezone-aware datetimes

    Raises:
        ValueError: If only one date is given or a clock string is invalid
    """
    if (start_date is None) != (end_date is None):
        raise ValueError("Start and end dates are required together")

    if start_date is None:
        start_date = end_date = today or date.today()

    return combine(start_date, start_time), combine(end_date, end_time)


def normalize_hhmm(value: str) -> str:
    """
    Validate a clock string and return it zero-padded.

    Example:
        >>> normalize_hhmm("9:05")
        '09:05'
    """
    return parse_hhmm(value).strftime(CLOCK_FORMAT)
