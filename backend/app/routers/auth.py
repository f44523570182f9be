"""Auth API routes — sign-up, sign-in and the caller's profile."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.user import AuthResponse, ProfileUpdate, SignInRequest, SignUpRequest, UserOut
from app.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest, db: Session = Depends(get_db)):
    user, token = user_service.sign_up(db, payload.email, payload.password, payload.display_name)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post("/signin", response_model=AuthResponse)
def sign_in(payload: SignInRequest, db: Session = Depends(get_db)):
    user, token = user_service.sign_in(db, payload.email, payload.password)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.get("/profile", response_model=UserOut)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update display name and/or bio (partial update)."""
    return user_service.update_profile(db, current_user, payload.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/account", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user_service.delete_account(db, current_user)
