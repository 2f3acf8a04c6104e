# app/crud/session.py
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from app.models.session import UserSession
from app.core.security import utcnow
from typing import Optional
import uuid

async def create_session(user_id: uuid.UUID, expires_at: datetime, db: AsyncSession) -> UserSession:
    new_session = UserSession(user_id=user_id, expires_at=expires_at)
    db.add(new_session)
    await db.flush()
    return new_session

async def get_active_session(session_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[UserSession]:
    result = await db.execute(
        select(UserSession).where(
            UserSession.id == session_id,
            UserSession.user_id == user_id,
            UserSession.expires_at > utcnow(),
        )
    )
    return result.scalar_one_or_none()

async def delete_session(session_id: uuid.UUID, db: AsyncSession) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.id == session_id))
    return result.rowcount

async def purge_expired_sessions(db: AsyncSession) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.expires_at <= utcnow()))
    await db.commit()
    return result.rowcount
