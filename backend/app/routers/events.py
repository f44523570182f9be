"""Event API routes — delegates to event_service for invariant enforcement."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user, require_admin
from app.database import get_db
from app.models.report import ReportStatus
from app.models.user import User
from app.schemas.event import (
    AdminRemoveRequest,
    EventCreate,
    EventOut,
    EventUpdate,
    FlagRequest,
    ReportOut,
    ReportResolve,
)
from app.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


# ---------------------------------------------------------------------------
# Admin moderation (declared first so the literal paths win)
# ---------------------------------------------------------------------------
@router.get("/admin/moderation", response_model=list[EventOut])
def list_for_moderation(
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(all|active|cancelled)$"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """All events, newest first, for the moderation screen."""
    return event_service.list_for_moderation(db, status_filter=status_filter, limit=limit, offset=offset)


@router.delete("/admin/{event_id}", response_model=EventOut)
def admin_remove_event(
    event_id: str,
    payload: Optional[AdminRemoveRequest] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Remove (soft-cancel) an event on moderation grounds."""
    reason = payload.reason if payload else None
    return event_service.admin_remove_event(db, event_id, admin, reason)


@router.get("/admin/reports", response_model=list[ReportOut])
def list_reports(
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return event_service.list_reports(db, status_filter)


@router.post("/admin/reports/{report_id}/resolve", response_model=ReportOut)
def resolve_report(
    report_id: str,
    payload: ReportResolve,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return event_service.resolve_report(db, report_id, admin, payload.status)


# ---------------------------------------------------------------------------
# Public and organizer routes
# ---------------------------------------------------------------------------
@router.get("/", response_model=list[EventOut])
def list_events(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List upcoming events with optional category and text filters."""
    return event_service.list_events(db, category=category, search=search, limit=limit, offset=offset)


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a new event organized by the caller."""
    return event_service.create_event(db, current_user, payload.model_dump())


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    """Fetch a single event by ID, cancelled ones included."""
    return event_service.get_event(db, event_id)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update an event (organizer or admin, outside the edit window unless cancelling)."""
    updates = payload.model_dump(exclude_unset=True)
    return event_service.update_event(db, event_id, current_user, updates)


@router.delete("/{event_id}", response_model=EventOut)
def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Soft-cancel an event; attendee history is kept."""
    return event_service.cancel_event(db, event_id, current_user)


@router.post("/{event_id}/flag", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def flag_event(
    event_id: str,
    payload: FlagRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Report an event for admin review."""
    return event_service.flag_event(db, event_id, current_user, payload.reason)
