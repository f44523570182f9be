"""Pydantic schemas for Users and auth."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: str = Field(..., min_length=2, max_length=50)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=2, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)


class UserOut(BaseModel):
    user_id: str
    email: str
    display_name: str
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    is_admin: bool
    suspended: bool
    joined_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"


class SuspendRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class DashboardStats(BaseModel):
    total_users: int
    total_events: int
    flagged_events: int
    suspended_users: int
    pending_reports: int
