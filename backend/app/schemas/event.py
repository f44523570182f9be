"""Pydantic schemas for Events, attendance and moderation."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from app.config import settings
from app.models.attendee import AttendeeStatus
from app.models.event import EventStatus
from app.models.report import ReportStatus
from app.utils.dates import as_utc, client_to_utc, utcnow


class GeoPoint(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Location(BaseModel):
    geo_point: GeoPoint
    address: str = Field(..., min_length=1, max_length=500)


def _check_capacity(value: Optional[int]) -> Optional[int]:
    if value is not None and not 0 <= value <= settings.MAX_EVENT_CAPACITY:
        raise ValueError(f"capacity must be between 0 and {settings.MAX_EVENT_CAPACITY}")
    return value


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=80)
    description: str = Field(..., max_length=4000)
    category: str = Field(..., min_length=1, max_length=50)
    location: Location
    capacity: int = 0  # 0 = unlimited
    start_time_utc: datetime
    end_time_utc: datetime
    cover_image: Optional[str] = None

    validate_capacity = field_validator("capacity")(_check_capacity)

    @field_validator("start_time_utc", "end_time_utc")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        return client_to_utc(value)

    @model_validator(mode="after")
    def check_times(self) -> "EventCreate":
        if self.end_time_utc <= self.start_time_utc:
            raise ValueError("End time must be after start time")
        if self.start_time_utc <= utcnow():
            raise ValueError("Event cannot be scheduled in the past")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=80)
    description: Optional[str] = Field(None, max_length=4000)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    location: Optional[Location] = None
    capacity: Optional[int] = None
    start_time_utc: Optional[datetime] = None
    end_time_utc: Optional[datetime] = None
    cover_image: Optional[str] = None
    status: Optional[EventStatus] = None

    validate_capacity = field_validator("capacity")(_check_capacity)

    @field_validator("start_time_utc", "end_time_utc")
    @classmethod
    def normalize_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return client_to_utc(value) if value is not None else None


class EventOut(BaseModel):
    event_id: str
    title: str
    description: str
    category: str
    location: Location
    capacity: int
    start_time_utc: datetime
    end_time_utc: datetime
    organizer_id: str
    cover_image: Optional[str] = None
    status: EventStatus
    flagged: bool
    removed_by: Optional[str] = None
    removal_reason: Optional[str] = None
    going_count: int = 0
    waitlist_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("start_time_utc", "end_time_utc", "created_at", "updated_at")
    @classmethod
    def attach_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class AttendeeOut(BaseModel):
    user_id: str
    status: AttendeeStatus
    joined_at: datetime
    promoted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("joined_at", "promoted_at")
    @classmethod
    def attach_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class JoinResult(BaseModel):
    event_id: str
    user_id: str
    status: AttendeeStatus
    message: str


class LeaveResult(BaseModel):
    event_id: str
    user_id: str
    message: str
    promoted_user_id: Optional[str] = None


class FlagRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class AdminRemoveRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class ReportOut(BaseModel):
    report_id: str
    event_id: str
    reporter_id: str
    reason: str
    status: ReportStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReportResolve(BaseModel):
    status: ReportStatus
