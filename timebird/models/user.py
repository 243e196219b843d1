"""Moneybird user model definitions."""
from pydantic import BaseModel


class MoneybirdUser(BaseModel):
    """User of a Moneybird administration."""

    id: str
    name: str
