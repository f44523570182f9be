"""Timestamp helpers shared by schemas and services."""
from datetime import datetime, timezone
from typing import Optional

import pytz

from app.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive value read back from the database.

    SQLite drops tzinfo on DateTime(timezone=True) columns; everything is
    stored in UTC, so a naive value coming out of the store is UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def client_to_utc(value: datetime) -> datetime:
    """Normalize a client-supplied timestamp to UTC.

    Naive values come from the mobile app's local clock (Toulouse), so they
    are localized to LOCAL_TIMEZONE before conversion.
    """
    if value.tzinfo is None:
        local_tz = pytz.timezone(settings.LOCAL_TIMEZONE)
        value = local_tz.localize(value)
    return value.astimezone(timezone.utc)
