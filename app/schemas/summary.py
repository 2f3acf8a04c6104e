# app/schemas/summary.py
from typing import Optional
from pydantic import BaseModel

from app.schemas.common import Money

class FinanceSummary(BaseModel):
    month: Optional[str] = None
    year: Optional[int] = None
    total_income: Money
    total_expenses: Money
    savings: Money
    savings_percentage: int

class CategoryTotal(BaseModel):
    category: str
    amount: Money

class MonthTrend(BaseModel):
    month: str
    income: Money
    expenses: Money
    savings: Money
