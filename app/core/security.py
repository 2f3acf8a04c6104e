# app/core/security.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from fastapi_users.password import PasswordHelper

from .config import Settings

password_helper = PasswordHelper()

SESSION_AUDIENCE = "finance-tracker:session"


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_password_hash(password: str) -> str:
    return password_helper.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """Returns (verified, new_hash); new_hash is set when the stored hash is outdated"""
    return password_helper.verify_and_update(plain_password, hashed_password)


def create_session_token(
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    settings: Settings,
    expires_at: datetime,
) -> str:
    payload = {
        "sub": str(user_id),
        "sid": str(session_id),
        "aud": SESSION_AUDIENCE,
        "iat": utcnow().replace(tzinfo=timezone.utc),
        "exp": expires_at.replace(tzinfo=timezone.utc),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str, settings: Settings) -> Optional[Tuple[uuid.UUID, uuid.UUID]]:
    """Returns (user_id, session_id), or None for any invalid or expired token"""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=SESSION_AUDIENCE,
        )
        return uuid.UUID(payload["sub"]), uuid.UUID(payload["sid"])
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is an InvalidTokenError
        return None
    except (KeyError, ValueError, TypeError):
        return None


def session_expiry(settings: Settings) -> datetime:
    return utcnow() + timedelta(seconds=settings.session_lifetime_seconds)
