"""User accounts: sign-up/sign-in, profile and admin management."""
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import create_access_token, hash_password, verify_password
from app.models.event import Event
from app.models.report import Report, ReportStatus
from app.models.user import User
from app.services.errors import EmailAlreadyExists, InvalidCredentials, UserNotFound
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise UserNotFound()
    return user


def sign_up(db: Session, email: str, password: str, display_name: str) -> tuple[User, str]:
    """Create an account and return it with a fresh access token."""
    email = email.lower()
    if db.query(User).filter(User.email == email).first():
        raise EmailAlreadyExists()

    user = User(
        email=email,
        display_name=display_name,
        password_hash=hash_password(password),
        is_admin=False,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyExists()
    db.refresh(user)
    logger.info("Created user %s (%s)", user.user_id, user.display_name)
    return user, create_access_token(user)


def sign_in(db: Session, email: str, password: str) -> tuple[User, str]:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or user.deleted or not verify_password(password, user.password_hash):
        logger.warning("Failed sign-in for %s", email)
        raise InvalidCredentials()
    return user, create_access_token(user)


def update_profile(db: Session, user: User, updates: dict[str, Any]) -> User:
    for field, value in updates.items():
        setattr(user, field, value)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("Updated profile of user %s", user.user_id)
    return user


def delete_account(db: Session, user: User) -> None:
    """Soft delete; the row stays so organized events keep their owner."""
    user.deleted = True
    user.deleted_at = utcnow()
    db.commit()
    logger.info("Deleted account of user %s", user.user_id)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
def list_users(db: Session, limit: int = 50, offset: int = 0) -> list[User]:
    return (
        db.query(User)
        .filter(User.deleted.is_(False))
        .order_by(User.joined_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def set_admin_status(db: Session, user_id: str, is_admin: bool, actor: User) -> User:
    user = get_user(db, user_id)
    user.is_admin = is_admin
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("Admin %s set is_admin=%s on user %s", actor.user_id, is_admin, user_id)
    return user


def suspend_user(db: Session, user_id: str, reason: str, actor: User) -> User:
    user = get_user(db, user_id)
    user.suspended = True
    user.suspension_reason = reason
    user.suspended_at = utcnow()
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("Admin %s suspended user %s (reason: %s)", actor.user_id, user_id, reason)
    return user


def dashboard_stats(db: Session) -> dict[str, int]:
    return {
        "total_users": db.query(User).count(),
        "total_events": db.query(Event).count(),
        "flagged_events": db.query(Event).filter(Event.flagged.is_(True)).count(),
        "suspended_users": db.query(User).filter(User.suspended.is_(True)).count(),
        "pending_reports": db.query(Report).filter(Report.status == ReportStatus.pending).count(),
    }
