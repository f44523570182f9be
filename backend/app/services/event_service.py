"""Event directory service — listing, lifecycle and moderation.

Responsibilities:
- Authorization hook: only the organizer or an admin may update/cancel
- Edit window: no edits within EDIT_WINDOW_MINUTES of start, except cancelling
- Soft delete: events move to ``cancelled`` and are never removed
- Mutation ledger (EventMutations) for every write
- Flag reports and admin removal
"""
import logging
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.event import Event, EventStatus
from app.models.event_mutation import EventMutation, ActionType
from app.models.report import Report, ReportStatus
from app.models.user import User
from app.services import attendance_service
from app.services.errors import (
    EditWindowClosed,
    EventCancelled,
    EventNotFound,
    InvalidEventTimes,
    ReportNotFound,
    Unauthorized,
)
from app.utils.dates import as_utc, utcnow

logger = logging.getLogger(__name__)

_LOCATION_FIELDS = ("latitude", "longitude", "address")


def _event_snapshot(event: Event) -> dict[str, Any]:
    """Serialize an event to a JSON-safe dict for the mutation ledger."""
    start = as_utc(event.start_time_utc)
    end = as_utc(event.end_time_utc)
    return {
        "event_id": event.event_id,
        "title": event.title,
        "category": event.category,
        "capacity": event.capacity,
        "start_time_utc": start.isoformat() if start else None,
        "end_time_utc": end.isoformat() if end else None,
        "status": event.status.value if event.status else None,
    }


def _record_mutation(
    db: Session,
    event: Event,
    actor_user_id: str,
    action_type: ActionType,
    before: Optional[dict[str, Any]],
) -> None:
    db.add(EventMutation(
        event_id=event.event_id,
        actor_user_id=actor_user_id,
        action_type=action_type,
        before_snapshot=before,
        after_snapshot=_event_snapshot(event),
    ))


def _check_authorization(event: Event, actor: User, action: str = "modify") -> None:
    """Only the organizer (or an admin) may mutate an event."""
    if event.organizer_id != actor.user_id and not actor.is_admin:
        raise Unauthorized(message=f"Only the organizer can {action} this event")


def _edit_window_closed(event: Event) -> bool:
    start = as_utc(event.start_time_utc)
    return utcnow() > start - timedelta(minutes=settings.EDIT_WINDOW_MINUTES)


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise EventNotFound()
    return event


def list_events(
    db: Session,
    category: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> list[Event]:
    """Upcoming active events, soonest first.

    The text search runs over the fetched page, matching title or
    description case-insensitively.
    """
    query = db.query(Event).filter(
        Event.status == EventStatus.active,
        Event.start_time_utc > utcnow(),
    )
    if category and category != "all":
        query = query.filter(Event.category == category)

    events = query.order_by(Event.start_time_utc.asc()).offset(offset).limit(limit).all()

    if search:
        needle = search.lower()
        events = [
            e for e in events
            if needle in e.title.lower() or needle in (e.description or "").lower()
        ]

    logger.info("Found %d events matching category=%s, search=%s", len(events), category, search)
    return events


def create_event(db: Session, organizer: User, data: dict[str, Any]) -> Event:
    """Create an active event owned by ``organizer``."""
    location = data.pop("location")
    event = Event(
        **data,
        latitude=location["geo_point"]["latitude"],
        longitude=location["geo_point"]["longitude"],
        address=location["address"],
        organizer_id=organizer.user_id,
        status=EventStatus.active,
    )
    db.add(event)
    db.flush()

    _record_mutation(db, event, organizer.user_id, ActionType.create, before=None)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.event_id, organizer.user_id)
    return event


def update_event(db: Session, event_id: str, actor: User, updates: dict[str, Any]) -> Event:
    """Apply a partial update.

    Setting ``status`` to ``cancelled`` is always allowed; any other edit is
    refused once the edit window before the start time has closed.
    """
    event = get_event(db, event_id)
    _check_authorization(event, actor, "update")

    if event.status == EventStatus.cancelled:
        raise EventCancelled(message="A cancelled event cannot be modified")

    cancelling = updates.get("status") == EventStatus.cancelled
    if not cancelling and _edit_window_closed(event):
        raise EditWindowClosed()

    new_start = updates.get("start_time_utc") or as_utc(event.start_time_utc)
    new_end = updates.get("end_time_utc") or as_utc(event.end_time_utc)
    if new_end <= new_start:
        raise InvalidEventTimes()
    if updates.get("start_time_utc") and new_start <= utcnow():
        raise InvalidEventTimes(message="Event cannot be moved into the past")

    before = _event_snapshot(event)

    location = updates.pop("location", None)
    if location:
        updates.update(
            latitude=location["geo_point"]["latitude"],
            longitude=location["geo_point"]["longitude"],
            address=location["address"],
        )

    capacity_changed = "capacity" in updates and updates["capacity"] != event.capacity
    for field, value in updates.items():
        if value is None and field != "cover_image":
            continue
        if hasattr(event, field) and field not in ("event_id", "organizer_id", "created_at"):
            setattr(event, field, value)
    event.updated_at = utcnow()

    if capacity_changed and event.status == EventStatus.active:
        attendance_service.fill_open_seats(db, event)

    _record_mutation(
        db, event, actor.user_id,
        ActionType.cancel if cancelling else ActionType.update,
        before=before,
    )
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s by %s (fields: %s)", event_id, actor.user_id, ", ".join(sorted(updates)))
    return event


def cancel_event(db: Session, event_id: str, actor: User) -> Event:
    """Soft-delete: move the event to ``cancelled``, keeping attendee history."""
    event = get_event(db, event_id)
    _check_authorization(event, actor, "delete")

    if event.status == EventStatus.cancelled:
        raise EventCancelled(message="Event is already cancelled")

    before = _event_snapshot(event)
    event.status = EventStatus.cancelled
    event.updated_at = utcnow()

    _record_mutation(db, event, actor.user_id, ActionType.cancel, before=before)
    db.commit()
    db.refresh(event)
    logger.info("Cancelled event %s by %s", event_id, actor.user_id)
    return event


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------
def flag_event(db: Session, event_id: str, reporter: User, reason: str) -> Report:
    """File a pending report against an event and mark it flagged."""
    event = get_event(db, event_id)
    report = Report(
        event_id=event.event_id,
        reporter_id=reporter.user_id,
        reason=reason,
        status=ReportStatus.pending,
    )
    db.add(report)
    event.flagged = True
    db.commit()
    db.refresh(report)
    logger.info("Event %s flagged by %s: %s", event_id, reporter.user_id, reason)
    return report


def list_for_moderation(
    db: Session,
    status_filter: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Event]:
    query = db.query(Event)
    if status_filter and status_filter != "all":
        query = query.filter(Event.status == EventStatus(status_filter))
    return query.order_by(Event.created_at.desc()).offset(offset).limit(limit).all()


def admin_remove_event(db: Session, event_id: str, admin: User, reason: Optional[str] = None) -> Event:
    """Cancel an event on moderation grounds, recording who removed it and why."""
    event = get_event(db, event_id)
    before = _event_snapshot(event)

    event.status = EventStatus.cancelled
    event.removed_by = admin.user_id
    event.removal_reason = reason or "Removed by admin"
    event.updated_at = utcnow()

    _record_mutation(db, event, admin.user_id, ActionType.admin_remove, before=before)
    db.commit()
    db.refresh(event)
    logger.info("Admin %s removed event %s (reason: %s)", admin.user_id, event_id, event.removal_reason)
    return event


def list_reports(db: Session, status_filter: Optional[ReportStatus] = None) -> list[Report]:
    query = db.query(Report)
    if status_filter:
        query = query.filter(Report.status == status_filter)
    return query.order_by(Report.created_at.desc()).all()


def resolve_report(db: Session, report_id: str, admin: User, new_status: ReportStatus) -> Report:
    report = db.query(Report).filter(Report.report_id == report_id).first()
    if not report:
        raise ReportNotFound()
    report.status = new_status
    db.commit()
    db.refresh(report)
    logger.info("Report %s marked %s by admin %s", report_id, new_status.value, admin.user_id)
    return report
