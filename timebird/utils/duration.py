"""Duration formatting for time entries."""
from datetime import datetime


def duration_minutes(started_at: datetime, ended_at: datetime) -> int:
    """
    Whole minutes between two timestamps, floored.

    Args:
        started_at: Start of the span
        ended_at: End of the span

    Returns:
        Number of complete minutes

    Raises:
        ValueError: If ended_at is before started_at
    """
    seconds = (ended_at - started_at).total_seconds()
    if seconds < 0:
        raise ValueError("Time entry ends before it starts")
    return int(seconds // 60)


def format_duration(started_at: datetime, ended_at: datetime) -> str:
    """
    Format the span between two timestamps as H:MM.

    Args:
        started_at: Start of the span
        ended_at: End of the span

    Returns:
        Duration string, hours unpadded and minutes zero-padded

    Raises:
        ValueError: If ended_at is before started_at

    Example:
        >>> from datetime import datetime
        >>> format_duration(datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 1, 11, 30))
        '2:30'
        >>> format_duration(datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 1, 9, 0, 59))
        '0:00'
    """
    hours, minutes = divmod(duration_minutes(started_at, ended_at), 60)
    return f"{hours}:{minutes:02d}"
