# app/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from app.models.user import User
from typing import Optional, Tuple
import uuid

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()

async def get_user_by_username(username: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def create_user(username: str, email: str, hashed_password: str, db: AsyncSession) -> User:
    """Adds and flushes; the caller owns the commit."""
    new_user = User(username=username, email=email, hashed_password=hashed_password)
    db.add(new_user)
    await db.flush()
    return new_user

async def backfill_missing_emails(domain: str, db: AsyncSession) -> Tuple[int, int]:
    """
    Give users created before email was required a placeholder address.
    A placeholder already taken (by a real address or an earlier placeholder)
    is skipped and the user keeps logging in by username.
    Returns (migrated, skipped).
    """
    result = await db.execute(select(User).where(User.email.is_(None)).order_by(User.created_at, User.id))
    users = result.scalars().all()
    if not users:
        return 0, 0

    taken_result = await db.execute(select(func.lower(User.email)).where(User.email.is_not(None)))
    taken = set(taken_result.scalars().all())

    migrated = skipped = 0
    for user in users:
        placeholder = f"{user.username}@{domain}".lower()
        if placeholder in taken:
            skipped += 1
            continue
        user.email = placeholder
        taken.add(placeholder)
        migrated += 1
    if migrated:
        await db.commit()
    return migrated, skipped
