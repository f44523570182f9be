"""Password hashing, bearer tokens and the current-user dependencies."""
import logging
from datetime import timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.services.errors import NotAuthenticated, Unauthorized
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a JWT whose ``sub`` claim is the user id."""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": user.user_id,
        "email": user.email,
        "is_admin": user.is_admin,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token payload, or None if it is invalid, expired or has no subject."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("Rejected access token: %s", e)
        return None
    if not payload.get("sub"):
        logger.warning("Access token has no 'sub' claim")
        return None
    return payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user."""
    if credentials is None:
        raise NotAuthenticated()

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise NotAuthenticated(message="Invalid or expired token")

    user = db.query(User).filter(User.user_id == payload["sub"]).first()
    if not user or user.deleted:
        logger.warning("Token subject %s does not match an active user", payload["sub"])
        raise NotAuthenticated(message="Invalid or expired token")
    if user.suspended:
        raise Unauthorized(message="Account suspended")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise Unauthorized(message="Admin access required")
    return current_user
