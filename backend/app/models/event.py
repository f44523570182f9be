"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Float, Boolean, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class EventStatus(str, enum.Enum):
    active = "active"
    cancelled = "cancelled"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(80), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(50), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(500), nullable=False)
    capacity = Column(Integer, nullable=False, default=0)  # 0 = unlimited
    start_time_utc = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time_utc = Column(DateTime(timezone=True), nullable=False)
    organizer_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    cover_image = Column(String(500), nullable=True)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.active)
    flagged = Column(Boolean, nullable=False, default=False)
    removed_by = Column(String(36), ForeignKey("users.user_id"), nullable=True)
    removal_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    attendees = relationship("EventAttendee", back_populates="event", cascade="all, delete-orphan")

    @property
    def location(self) -> dict:
        return {
            "geo_point": {"latitude": self.latitude, "longitude": self.longitude},
            "address": self.address,
        }

    @property
    def going_count(self) -> int:
        from app.models.attendee import AttendeeStatus
        return sum(1 for a in self.attendees if a.status == AttendeeStatus.going)

    @property
    def waitlist_count(self) -> int:
        from app.models.attendee import AttendeeStatus
        return sum(1 for a in self.attendees if a.status == AttendeeStatus.waitlist)
