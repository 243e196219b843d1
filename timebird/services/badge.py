"""Badge indicator for the desktop shell."""
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class BadgeIndicator:
    """
    Tracks the app badge count the desktop shell should display.

    The shell polls the timer endpoint and mirrors badge_count onto the
    window; 1 while the timer runs, None otherwise.
    """

    def __init__(self):
        self.badge_count: Optional[int] = None

    def notify_busy(self) -> None:
        self.badge_count = 1
        logger.debug("Badge set")

    def clear_busy(self) -> None:
        self.badge_count = None
        logger.debug("Badge cleared")
