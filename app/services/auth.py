# app/services/auth.py
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.db_utils import with_store_guard
from app.core.exceptions import AuthError, ConflictError, UnauthenticatedError, ValidationError
from app.core.security import (
    create_session_token,
    decode_session_token,
    get_password_hash,
    session_expiry,
    verify_password,
)
from app.crud.session import create_session, delete_session, get_active_session
from app.crud.user import create_user, get_user_by_email, get_user_by_id, get_user_by_username
from app.models.user import User
from app.schemas.user import AuthSession, UserRead

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 50


class AuthService:
    """Registration, login and the session lifecycle.

    A session is a ``user_sessions`` row plus a signed token that names it.
    The token alone is never enough: logout deletes the row, and a token whose
    row is gone no longer resolves to a user.
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.store_timeout = settings.STORE_TIMEOUT_SECONDS

    def _validate_registration(self, username: str, email: str, password: str) -> None:
        if not username:
            raise ValidationError("Username is required")
        if len(username) > USERNAME_MAX_LENGTH:
            raise ValidationError(f"Username must be at most {USERNAME_MAX_LENGTH} characters long")
        if "@" in username:
            # "@" is how login tells an email from a username
            raise ValidationError("Username cannot contain '@'")
        if not email or "@" not in email:
            raise ValidationError("Invalid email format")
        if password is None or len(password) < self.settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {self.settings.PASSWORD_MIN_LENGTH} characters long"
            )

    @with_store_guard
    async def register(self, username: str, email: str, password: str) -> UserRead:
        username = (username or "").strip()
        email = (email or "").strip().lower()
        self._validate_registration(username, email, password)

        if await get_user_by_username(username, self.db):
            raise ConflictError("Username already exists")
        if await get_user_by_email(email, self.db):
            raise ConflictError("Email already exists")

        try:
            user = await create_user(username, email, get_password_hash(password), self.db)
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            await self.db.rollback()
            raise ConflictError("Username or email already exists")

        logger.info(f"User {username} registered")
        return UserRead.model_validate(user)

    async def _find_user(self, identifier: str) -> Optional[User]:
        if "@" in identifier:
            return await get_user_by_email(identifier, self.db)
        return await get_user_by_username(identifier, self.db)

    @with_store_guard
    async def login(self, identifier: str, password: str) -> AuthSession:
        identifier = (identifier or "").strip()
        user = await self._find_user(identifier) if identifier else None
        if user is None:
            logger.info(f"Login failed for {identifier!r}: unknown user")
            raise AuthError()

        verified, updated_hash = verify_password(password or "", user.hashed_password)
        if not verified:
            logger.info(f"Login failed for {identifier!r}: wrong password")
            raise AuthError()
        if updated_hash is not None:
            user.hashed_password = updated_hash

        expires_at = session_expiry(self.settings)
        session = await create_session(user.id, expires_at, self.db)
        await self.db.commit()

        token = create_session_token(user.id, session.id, self.settings, expires_at)
        logger.info(f"User {user.username} logged in")
        return AuthSession(user=UserRead.model_validate(user), token=token, expires_at=expires_at)

    @with_store_guard
    async def logout(self, token: Optional[str]) -> None:
        """Destroy the session behind ``token``; unknown or dead tokens are ignored."""
        if not token:
            return
        claims = decode_session_token(token, self.settings)
        if claims is None:
            return
        user_id, session_id = claims
        removed = await delete_session(session_id, self.db)
        await self.db.commit()
        if removed:
            logger.info(f"Session {session_id} for user {user_id} ended")

    @with_store_guard
    async def current_user(self, token: Optional[str]) -> UserRead:
        if not token:
            raise UnauthenticatedError()
        claims = decode_session_token(token, self.settings)
        if claims is None:
            raise UnauthenticatedError("Invalid or expired session")
        user_id, session_id = claims

        if await get_active_session(session_id, user_id, self.db) is None:
            raise UnauthenticatedError("Invalid or expired session")
        user = await get_user_by_id(user_id, self.db)
        if user is None:
            raise UnauthenticatedError("User not found")
        return UserRead.model_validate(user)
