"""Attendance API routes — join, leave and attendee listing."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.attendee import AttendeeStatus
from app.models.user import User
from app.schemas.event import AttendeeOut, JoinResult, LeaveResult
from app.services import attendance_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}/join", response_model=JoinResult)
def join_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Join an event; lands on the waitlist when the event is full."""
    attendee = attendance_service.join_event(db, event_id, current_user.user_id)
    message = (
        "Successfully joined event"
        if attendee.status == AttendeeStatus.going
        else "Event is full, added to waitlist"
    )
    return JoinResult(
        event_id=event_id,
        user_id=current_user.user_id,
        status=attendee.status,
        message=message,
    )


@router.post("/{event_id}/leave", response_model=LeaveResult)
def leave_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Leave an event; frees a seat for the first waitlisted user."""
    promoted = attendance_service.leave_event(db, event_id, current_user.user_id)
    return LeaveResult(
        event_id=event_id,
        user_id=current_user.user_id,
        message="Successfully left event",
        promoted_user_id=promoted.user_id if promoted else None,
    )


@router.get("/{event_id}/attendees", response_model=list[AttendeeOut])
def list_attendees(event_id: str, db: Session = Depends(get_db)):
    """Attendees in join order."""
    return attendance_service.get_attendees(db, event_id)
