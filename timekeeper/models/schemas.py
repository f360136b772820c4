"""Pydantic models for the tracking snapshot and API payloads.

Field names are camelCase to match the JSON wire format.
"""

from datetime import date
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, field_validator


def _validate_entry_date(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"timestamp must be an ISO date (YYYY-MM-DD): {value!r}") from e
    return value


class Folder(BaseModel):
    """A node in the user's folder hierarchy. ``parentId=None`` marks a root."""

    id: str
    name: str
    parentId: str | None = None
    order: int = 0


class Module(BaseModel):
    """A trackable project living inside exactly one folder."""

    id: str
    name: str
    folderId: str
    targetHours: float | None = None
    notes: str | None = None
    order: int = 0


class Entry(BaseModel):
    """A single block of recorded time against a module."""

    id: str
    moduleId: str
    activityType: str
    description: str | None = None
    durationHours: float = Field(..., gt=0)
    timestamp: str  # YYYY-MM-DD
    createdAt: str  # ISO datetime, immutable

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        return _validate_entry_date(v)


class Profile(BaseModel):
    """Per-user preferences."""

    userId: str
    email: str | None = None
    displayName: str | None = None
    timezone: str = "Europe/Berlin"
    weeklyFocusGoalMinutes: int = 1500
    defaultEntryDurationMinutes: int = 60
    defaultView: str = "dashboard"
    updatedAt: str | None = None


class TimerSession(BaseModel):
    id: str
    moduleId: str | None = None
    startedAt: str
    stoppedAt: str | None = None
    durationSeconds: int | None = None
    note: str | None = None
    createdAt: str


class TimeTrackingState(BaseModel):
    """Snapshot of the three tracked collections.

    A snapshot is never mutated in place; every change produces a new object.
    """

    folders: list[Folder] = Field(default_factory=list)
    modules: list[Module] = Field(default_factory=list)
    entries: list[Entry] = Field(default_factory=list)


class StatePayload(BaseModel):
    """Full dataset returned by ``GET /api/zeit/state``."""

    profile: Profile | None = None
    folders: list[Folder] = Field(default_factory=list)
    modules: list[Module] = Field(default_factory=list)
    entries: list[Entry] = Field(default_factory=list)


# Request models


class CreateFolderRequest(BaseModel):
    name: str = Field(..., min_length=1)
    parentId: str | None = None


class UpdateFolderRequest(BaseModel):
    """Partial update. ``parentId=None`` (explicitly set) moves the folder to root."""

    name: str | None = Field(None, min_length=1)
    parentId: str | None = None
    order: int | None = None


class CreateModuleRequest(BaseModel):
    name: str = Field(..., min_length=1)
    folderId: str
    targetHours: float | None = Field(None, ge=0)
    notes: str | None = None


class UpdateModuleRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    folderId: str | None = None
    targetHours: float | None = Field(None, ge=0)
    notes: str | None = None
    order: int | None = None


class CreateEntryRequest(BaseModel):
    moduleId: str
    activityType: str = Field(..., min_length=1)
    description: str | None = None
    durationHours: float = Field(..., gt=0)
    timestamp: str

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        return _validate_entry_date(v)


class UpdateEntryRequest(BaseModel):
    moduleId: str | None = None
    activityType: str | None = Field(None, min_length=1)
    description: str | None = None
    durationHours: float | None = Field(None, gt=0)
    timestamp: str | None = None

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: str | None) -> str | None:
        return _validate_entry_date(v)


class UpdateProfileRequest(BaseModel):
    email: str | None = None
    displayName: str | None = None
    timezone: str | None = None
    weeklyFocusGoalMinutes: int | None = Field(None, ge=0)
    defaultEntryDurationMinutes: int | None = Field(None, gt=0)
    defaultView: str | None = None


class CreateTimerSessionRequest(BaseModel):
    moduleId: str | None = None
    startedAt: str
    stoppedAt: str | None = None
    durationSeconds: int | None = Field(None, ge=0)
    note: str | None = None


# Response envelopes

DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    """Success envelope: every API response body is {"data": ...}."""

    data: DataT


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
