"""Credential model definitions."""
from typing import Optional

from pydantic import BaseModel


def mask_token(token: str) -> str:
    """Hide all but the last four characters of an API token."""
    if not token:
        return ""
    return f"{'*' * max(len(token) - 4, 0)}{token[-4:]}"


class Credentials(BaseModel):
    """Moneybird API credentials persisted in the settings store."""

    api_token: str = ""
    administration_id: str = ""
    user_id: str = ""

    @property
    def is_configured(self) -> bool:
        """Token and administration id are the minimum for API calls."""
        return bool(self.api_token and self.administration_id)


class CredentialsUpdate(BaseModel):
    """
    Settings form payload.

    An omitted api_token, or one equal to the masked stored token, keeps
    the stored token.
    """

    api_token: Optional[str] = None
    administration_id: str
    user_id: str = ""

    def resolve_token(self, current: str) -> str:
        """Token to save given the currently stored one."""
        if self.api_token is None or self.api_token == mask_token(current):
            return current
        return self.api_token


class CredentialsView(BaseModel):
    """Credentials as shown to the presentation layer, token masked."""

    api_token: str
    administration_id: str
    user_id: str
    configured: bool

    @classmethod
    def from_credentials(cls, credentials: Credentials) -> "CredentialsView":
        return cls(
            api_token=mask_token(credentials.api_token),
            administration_id=credentials.administration_id,
            user_id=credentials.user_id,
            configured=credentials.is_configured,
        )
