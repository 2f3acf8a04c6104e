# app/api/v1/routes/expenses.py
from fastapi import APIRouter, Depends, status
from typing import List
import uuid

from app.api.deps import get_current_user, get_finance_service
from app.schemas.expense import ExpenseCreate, ExpenseRead
from app.schemas.user import UserRead
from app.services.finance import FinanceService

router = APIRouter(prefix="/expenses", tags=["expenses"])

@router.get("", response_model=List[ExpenseRead])
async def read_expenses(
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    return await finance.list_expenses(user.id)

@router.post("", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_expense(
    ex_in: ExpenseCreate,
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    return await finance.add_expense(user.id, ex_in.amount, ex_in.category_id, ex_in.date)

@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_endpoint(
    expense_id: uuid.UUID,
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    await finance.delete_expense(user.id, expense_id)
    return None
