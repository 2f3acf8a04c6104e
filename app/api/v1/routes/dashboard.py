# app/api/v1/routes/dashboard.py
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from app.api.deps import get_current_user, get_finance_service
from app.schemas.summary import CategoryTotal, FinanceSummary, MonthTrend
from app.schemas.user import UserRead
from app.services.finance import FinanceService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/summary", response_model=FinanceSummary)
async def get_dashboard_summary(
    month: Optional[str] = Query(None, description="Full month name; requires year"),
    year: Optional[int] = Query(None, description="Calendar year; requires month"),
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    """
    Income, expenses, savings and savings rate.
    All-time by default, or for one month when month and year are given.
    """
    return await finance.summary(user.id, month, year)

@router.get("/categories", response_model=List[CategoryTotal])
async def get_category_breakdown(
    month: str = Query(..., description="Full month name"),
    year: int = Query(...),
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    """Spending per category for one month, largest first"""
    return await finance.category_breakdown(user.id, month, year)

@router.get("/trend", response_model=List[MonthTrend])
async def get_yearly_trend(
    year: int = Query(...),
    finance: FinanceService = Depends(get_finance_service),
    user: UserRead = Depends(get_current_user),
):
    """Income, expenses and savings for each month of the year"""
    return await finance.yearly_trend(user.id, year)
