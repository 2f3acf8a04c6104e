# app/schemas/user.py
from typing import Optional
from datetime import datetime
import uuid
from pydantic import BaseModel, Field, AliasChoices

class UserCreate(BaseModel):
    username: str
    email: str
    password: str

# Public-safe projection; never carries the password hash
class UserRead(BaseModel):
    id: uuid.UUID
    username: str
    email: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class LoginRequest(BaseModel):
    # Frontends send either {"username": ...} or {"email": ...}
    identifier: str = Field(
        ...,
        validation_alias=AliasChoices("identifier", "username", "email"),
        description="Username or email address",
    )
    password: str

class AuthSession(BaseModel):
    user: UserRead
    token: str
    expires_at: datetime

class LoginResponse(BaseModel):
    user: UserRead
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
