# app/api/deps.py
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.database import get_async_session
from app.schemas.user import UserRead
from app.services.auth import AuthService
from app.services.finance import FinanceService

# Security schemes
optional_security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_token(
    request: Request,
    settings: Settings = Depends(get_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[str]:
    """
    Session credential from, in order:
    - Authorization header
    - Cookies
    """
    if credentials and credentials.credentials:
        return credentials.credentials

    token = request.cookies.get(settings.COOKIE_NAME)
    # Remove "Bearer " prefix if present in cookie
    if token and token.startswith("Bearer "):
        token = token[7:]
    return token or None


async def get_auth_service(
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings)


async def get_finance_service(
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> FinanceService:
    return FinanceService(db, store_timeout=settings.STORE_TIMEOUT_SECONDS)


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> UserRead:
    """Resolves the session to a user; UnauthenticatedError becomes a 401."""
    return await auth.current_user(token)
