"""User API routes — the caller's events and admin user management."""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import get_current_user, require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.event import EventOut
from app.schemas.user import DashboardStats, SuspendRequest, UserOut
from app.services import attendance_service, user_service
from app.services.attendance_service import UserEventsMode

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/events", response_model=list[EventOut])
def get_user_events(
    event_type: UserEventsMode = Query(UserEventsMode.attending, alias="type"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Events the caller attends (going) or organizes."""
    return attendance_service.get_user_events(db, current_user.user_id, event_type)


@router.get("/admin/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return user_service.dashboard_stats(db)


@router.get("/admin/users", response_model=list[UserOut])
def list_users(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return user_service.list_users(db, limit=limit, offset=offset)


@router.post("/admin/users/{user_id}/promote", response_model=UserOut)
def promote_to_admin(user_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return user_service.set_admin_status(db, user_id, True, admin)


@router.post("/admin/users/{user_id}/demote", response_model=UserOut)
def demote_from_admin(user_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return user_service.set_admin_status(db, user_id, False, admin)


@router.post("/admin/users/{user_id}/suspend", response_model=UserOut)
def suspend_user(
    user_id: str,
    payload: SuspendRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return user_service.suspend_user(db, user_id, payload.reason, admin)
