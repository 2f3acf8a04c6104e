# app/crud/expense.py
from datetime import date
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.category import Category
from app.models.expense import Expense
from typing import List, Optional
import uuid

async def get_expenses_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Expense]:
    result = await db.execute(
        select(Expense)
        .where(Expense.user_id == user_id)
        # created_at has microsecond resolution; id only keeps equal timestamps in a stable order
        .order_by(Expense.created_at, Expense.id)
    )
    return result.scalars().all()

async def get_expense_by_id(expense_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Expense]:
    result = await db.execute(
        select(Expense).where(Expense.id == expense_id, Expense.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_expense_for_user(
    user_id: uuid.UUID,
    amount: Decimal,
    category: Category,
    expense_date: date,
    db: AsyncSession,
) -> Expense:
    # Attach the already-loaded category so the name is available without a lazy load
    new_ex = Expense(user_id=user_id, amount=amount, category=category, date=expense_date)
    db.add(new_ex)
    await db.commit()
    return new_ex

async def delete_expense(expense: Expense, db: AsyncSession) -> None:
    await db.delete(expense)
    await db.commit()
