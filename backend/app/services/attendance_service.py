"""Attendance service: join/leave with capacity, waitlist and promotion.

Invariants:
- At most one EventAttendee row per (event, user) (composite primary key).
- The number of ``going`` rows never exceeds ``Event.capacity`` unless the
  capacity is 0 (unlimited).
- The waitlist is FIFO by ``joined_at``; promotion takes the earliest entry.

Join and leave each run in a single transaction that first locks the event
row (``SELECT ... FOR UPDATE``), so the count-then-write sequence for one
event is serialized on PostgreSQL. SQLite ignores the lock clause.
"""
import enum
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.attendee import EventAttendee, AttendeeStatus
from app.models.event import Event, EventStatus
from app.services.errors import AlreadyJoined, EventCancelled, EventNotFound, NotAttending
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


class UserEventsMode(str, enum.Enum):
    attending = "attending"
    organized = "organized"


def _lock_event(db: Session, event_id: str) -> Optional[Event]:
    return db.query(Event).filter(Event.event_id == event_id).with_for_update().first()


def count_going(db: Session, event_id: str) -> int:
    """Current number of ``going`` attendees, read from the store."""
    return (
        db.query(func.count(EventAttendee.user_id))
        .filter(
            EventAttendee.event_id == event_id,
            EventAttendee.status == AttendeeStatus.going,
        )
        .scalar()
    )


def _has_open_seat(event: Event, going: int) -> bool:
    return event.capacity == 0 or going < event.capacity


def _first_waitlisted(db: Session, event_id: str) -> Optional[EventAttendee]:
    return (
        db.query(EventAttendee)
        .filter(
            EventAttendee.event_id == event_id,
            EventAttendee.status == AttendeeStatus.waitlist,
        )
        .order_by(EventAttendee.joined_at.asc(), EventAttendee.user_id.asc())
        .first()
    )


def fill_open_seats(db: Session, event: Event) -> list[EventAttendee]:
    """Promote waitlisted attendees, earliest first, while seats are open.

    Does not commit; callers own the transaction.
    """
    db.flush()
    going = count_going(db, event.event_id)
    promoted: list[EventAttendee] = []
    while _has_open_seat(event, going):
        candidate = _first_waitlisted(db, event.event_id)
        if candidate is None:
            break
        candidate.status = AttendeeStatus.going
        candidate.promoted_at = utcnow()
        db.flush()
        promoted.append(candidate)
        going += 1
        logger.info("Promoted user %s from waitlist on event %s", candidate.user_id, event.event_id)
    return promoted


def join_event(db: Session, event_id: str, user_id: str) -> EventAttendee:
    """Register a user on an event as ``going``, or ``waitlist`` when full."""
    event = _lock_event(db, event_id)
    if not event:
        raise EventNotFound(status_code=400)

    existing = db.get(EventAttendee, (event_id, user_id))
    if existing:
        raise AlreadyJoined()

    if event.status == EventStatus.cancelled:
        raise EventCancelled(message="Cannot join a cancelled event")

    going = count_going(db, event_id)
    attendee = EventAttendee(
        event_id=event_id,
        user_id=user_id,
        status=AttendeeStatus.going if _has_open_seat(event, going) else AttendeeStatus.waitlist,
        joined_at=utcnow(),
    )
    db.add(attendee)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyJoined()
    db.refresh(attendee)
    logger.info(
        "User %s joined event %s as %s (%d/%s going)",
        user_id, event_id, attendee.status.value, going, event.capacity or "unlimited",
    )
    return attendee


def leave_event(db: Session, event_id: str, user_id: str) -> Optional[EventAttendee]:
    """Remove a user's registration; returns the promoted attendee, if any.

    Only the departure of a ``going`` attendee frees a seat, so only that
    case runs the waitlist promotion, and never on a cancelled event. The delete and the promotion are
    committed together.
    """
    event = _lock_event(db, event_id)
    attendee = db.get(EventAttendee, (event_id, user_id)) if event else None
    if not attendee:
        raise NotAttending()

    was_going = attendee.status == AttendeeStatus.going
    db.delete(attendee)

    promoted: list[EventAttendee] = []
    if was_going and event.status == EventStatus.active:
        promoted = fill_open_seats(db, event)
    db.commit()
    logger.info("User %s left event %s (was %s)", user_id, event_id, "going" if was_going else "not going")

    if not promoted:
        return None
    db.refresh(promoted[0])
    return promoted[0]


def get_attendees(db: Session, event_id: str) -> list[EventAttendee]:
    """All registrations for an event in join order."""
    if not db.query(Event.event_id).filter(Event.event_id == event_id).first():
        raise EventNotFound()
    return (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == event_id)
        .order_by(EventAttendee.joined_at.asc(), EventAttendee.user_id.asc())
        .all()
    )


def get_user_events(db: Session, user_id: str, mode: UserEventsMode = UserEventsMode.attending) -> list[Event]:
    """Events a user organizes (newest first) or attends as ``going`` (soonest first)."""
    if mode == UserEventsMode.organized:
        return (
            db.query(Event)
            .filter(Event.organizer_id == user_id)
            .order_by(Event.start_time_utc.desc())
            .all()
        )
    return (
        db.query(Event)
        .join(EventAttendee, EventAttendee.event_id == Event.event_id)
        .filter(
            EventAttendee.user_id == user_id,
            EventAttendee.status == AttendeeStatus.going,
        )
        .order_by(Event.start_time_utc.asc())
        .all()
    )
