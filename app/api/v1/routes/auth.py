# app/api/v1/routes/auth.py
from typing import Optional
from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_auth_service, get_current_user, get_session_token, get_settings
from app.core.config import Settings
from app.schemas.user import LoginRequest, LoginResponse, UserCreate, UserRead
from app.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserCreate,
    auth: AuthService = Depends(get_auth_service),
):
    return await auth.register(user_in.username, user_in.email, user_in.password)

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    session = await auth.login(credentials.identifier, credentials.password)
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=session.token,
        max_age=settings.session_lifetime_seconds,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return LoginResponse(user=session.user, access_token=session.token, expires_at=session.expires_at)

@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """
    Logout endpoint that doesn't require authentication.
    Ends the server-side session if there is one and clears the cookie.
    """
    await auth.logout(token)
    response.delete_cookie(key=settings.COOKIE_NAME)
    return {"detail": "Successfully logged out"}

@router.get("/me", response_model=UserRead)
async def read_current_user(user: UserRead = Depends(get_current_user)):
    """Get current user's profile"""
    return user
