"""Time entry model definitions."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ValidationInfo, computed_field, field_validator, model_validator

from timebird.utils.duration import duration_minutes, format_duration


def check_span(started_at: datetime, ended_at: datetime) -> None:
    """Raise ValueError unless started_at <= ended_at."""
    try:
        duration_minutes(started_at, ended_at)
    except TypeError:
        raise ValueError("started_at and ended_at must both be timezone-aware or both naive")


class Reference(BaseModel):
    """Reference to a Moneybird contact or project."""

    id: str
    name: str = ""


def require_description(value: str) -> str:
    if not value.strip():
        raise ValueError("Description is required")
    return value


def require_reference_id(value: Reference, field_name: str) -> Reference:
    if not value.id:
        raise ValueError(f"{field_name.capitalize()} id is required")
    return value


class TimeEntryBase(BaseModel):
    """Base time entry fields."""

    description: str
    contact: Optional[Reference] = None
    project: Optional[Reference] = None
    started_at: datetime
    ended_at: datetime
    billable: Optional[bool] = None
    user_id: Optional[str] = None


class TimeEntryCreate(TimeEntryBase):
    """Time entry submission model."""

    contact: Reference
    project: Reference

    @field_validator("description")
    @classmethod
    def description_required(cls, value: str) -> str:
        return require_description(value)

    @field_validator("contact", "project")
    @classmethod
    def reference_id_required(cls, value: Reference, info: ValidationInfo) -> Reference:
        return require_reference_id(value, info.field_name)

    @model_validator(mode="after")
    def span_ordered(self) -> "TimeEntryCreate":
        check_span(self.started_at, self.ended_at)
        return self


class TimeEntryUpdate(BaseModel):
    """Partial time entry update; only explicitly set fields are sent."""

    description: Optional[str] = None
    contact: Optional[Reference] = None
    project: Optional[Reference] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    billable: Optional[bool] = None
    user_id: Optional[str] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return value if value is None else require_description(value)

    @field_validator("contact", "project")
    @classmethod
    def reference_id_not_blank(
        cls, value: Optional[Reference], info: ValidationInfo
    ) -> Optional[Reference]:
        return value if value is None else require_reference_id(value, info.field_name)

    @model_validator(mode="after")
    def span_ordered(self) -> "TimeEntryUpdate":
        if self.started_at is not None and self.ended_at is not None:
            check_span(self.started_at, self.ended_at)
        return self


class TimeEntry(TimeEntryBase):
    """Time entry as returned by Moneybird."""

    id: str = ""
    url: Optional[str] = None

    @model_validator(mode="after")
    def span_ordered(self) -> "TimeEntry":
        check_span(self.started_at, self.ended_at)
        return self

    @computed_field
    @property
    def time(self) -> str:
        """Duration as H:MM, derived from the timestamps."""
        return format_duration(self.started_at, self.ended_at)
