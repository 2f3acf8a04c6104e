# app/crud/income.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update, delete
from app.models.income import Income
from typing import Any, Dict, List, Optional
import uuid

async def get_incomes_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Income]:
    result = await db.execute(
        select(Income)
        .where(Income.user_id == user_id)
        # created_at has microsecond resolution; id only keeps equal timestamps in a stable order
        .order_by(Income.created_at, Income.id)
    )
    return result.scalars().all()

async def get_income_by_id(income_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Income]:
    result = await db.execute(
        select(Income)
        .where(Income.id == income_id, Income.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def create_income_for_user(user_id: uuid.UUID, values: Dict[str, Any], db: AsyncSession) -> Income:
    new_income = Income(**values, user_id=user_id, is_locked=False)
    db.add(new_income)
    await db.commit()
    await db.refresh(new_income)
    return new_income

async def update_unlocked_income(
    income_id: uuid.UUID,
    user_id: uuid.UUID,
    values: Dict[str, Any],
    db: AsyncSession,
) -> bool:
    """
    Conditional update that only touches the row while it is unlocked.
    Returns False when nothing matched (missing, foreign, or locked).
    """
    result = await db.execute(
        update(Income)
        .where(
            Income.id == income_id,
            Income.user_id == user_id,
            Income.is_locked.is_(False),
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1

async def delete_unlocked_income(income_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> bool:
    result = await db.execute(
        delete(Income)
        .where(
            Income.id == income_id,
            Income.user_id == user_id,
            Income.is_locked.is_(False),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
