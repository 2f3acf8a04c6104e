# app/api/v1/routes/incomes.py
from fastapi import APIRouter, Depends, status
from typing import List
import uuid

from app.api.deps import get_current_user, get_finance_service
from app.schemas.income import IncomeCreate, IncomeRead, IncomeUpdate
from app.schemas.user import UserRead
from app.services.finance import FinanceService

router = APIRouter(prefix="/incomes", tags=["incomes"])

@router.get("", response_model=List[IncomeRead])
async def read_incomes(
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    return await finance.list_incomes(user.id)

@router.post("", response_model=IncomeRead, status_code=status.HTTP_201_CREATED)
async def create_income(
    income_in: IncomeCreate,
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    return await finance.add_income(user.id, income_in.amount, income_in.month, income_in.year)

@router.patch("/{income_id}", response_model=IncomeRead)
async def update_income(
    income_id: uuid.UUID,
    income_in: IncomeUpdate,
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    return await finance.update_income(user.id, income_id, **income_in.model_dump(exclude_unset=True))

@router.post("/{income_id}/lock", response_model=IncomeRead)
async def lock_income(
    income_id: uuid.UUID,
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    """Lock an income; it can never be edited or deleted afterwards."""
    return await finance.lock_income(user.id, income_id)

@router.delete("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_income(
    income_id: uuid.UUID,
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    await finance.delete_income(user.id, income_id)
    return None
