# app/api/v1/routes/categories.py
from fastapi import APIRouter, Depends, status
from typing import List

from app.api.deps import get_current_user, get_finance_service
from app.schemas.category import CategoryCreate, CategoryRead
from app.schemas.user import UserRead
from app.services.finance import FinanceService

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("", response_model=List[CategoryRead])
async def read_categories(
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    return await finance.list_categories(user.id)

@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryCreate,
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    return await finance.add_category(user.id, cat_in.name)
