"""EventAttendee ORM model — one row per (event, user) registration."""
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.database import Base


class AttendeeStatus(str, enum.Enum):
    going = "going"
    waitlist = "waitlist"
    declined = "declined"


class EventAttendee(Base):
    __tablename__ = "event_attendees"
    __table_args__ = (
        Index("ix_event_attendees_event_status_joined", "event_id", "status", "joined_at"),
        Index("ix_event_attendees_user_status", "user_id", "status"),
    )

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    status = Column(SAEnum(AttendeeStatus), nullable=False, default=AttendeeStatus.going)
    joined_at = Column(DateTime(timezone=True), nullable=False)
    promoted_at = Column(DateTime(timezone=True), nullable=True)

    event = relationship("Event", back_populates="attendees")
