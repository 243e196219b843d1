"""Error types raised by the Timebird services."""
from typing import Optional


class TimebirdError(Exception):
    """Base class for Timebird errors."""


class CredentialStoreError(TimebirdError):
    """The local settings file could not be read or written."""


class RemoteServiceError(TimebirdError):
    """A Moneybird API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
