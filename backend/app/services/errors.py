"""Domain errors surfaced to the HTTP layer.

Each error is an HTTPException so services can raise it directly and FastAPI
renders it as ``{"detail": {"error": <code>, "message": <text>}}``.
"""
from typing import Optional

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    code = "Error"
    http_status = status.HTTP_400_BAD_REQUEST
    message = "Request failed"
    headers: Optional[dict] = None

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(
            status_code=status_code or self.http_status,
            detail={"error": self.code, "message": message or self.message},
            headers=self.headers,
        )


class NotFound(ServiceError):
    code = "NotFound"
    http_status = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class EventNotFound(NotFound):
    message = "Event not found"


class UserNotFound(NotFound):
    message = "User not found"


class CategoryNotFound(NotFound):
    message = "Category not found"


class ReportNotFound(NotFound):
    message = "Report not found"


class AlreadyJoined(ServiceError):
    code = "AlreadyJoined"
    message = "User already joined this event"


class NotAttending(ServiceError):
    code = "NotAttending"
    message = "User is not attending this event"


class EventCancelled(ServiceError):
    code = "EventCancelled"
    message = "Event is cancelled"


class EditWindowClosed(ServiceError):
    code = "EditWindowClosed"
    message = "Event cannot be edited within 1 hour of start time"


class InvalidEventTimes(ServiceError):
    code = "InvalidEventTimes"
    message = "End time must be after start time"


class Unauthorized(ServiceError):
    code = "Unauthorized"
    http_status = status.HTTP_403_FORBIDDEN
    message = "Only the organizer can modify this event"


class NotAuthenticated(ServiceError):
    code = "NotAuthenticated"
    http_status = status.HTTP_401_UNAUTHORIZED
    message = "Access token required"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentials(ServiceError):
    code = "InvalidCredentials"
    http_status = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class EmailAlreadyExists(ServiceError):
    code = "EmailAlreadyExists"
    http_status = status.HTTP_409_CONFLICT
    message = "User with this email already exists"


class CategoryExists(ServiceError):
    code = "CategoryExists"
    http_status = status.HTTP_409_CONFLICT
    message = "Category already exists"
