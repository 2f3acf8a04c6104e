# app/schemas/income.py
from typing import Optional
from decimal import Decimal
from datetime import datetime
import uuid
from pydantic import BaseModel, Field

from app.schemas.common import Money

class IncomeCreate(BaseModel):
    amount: Decimal = Field(..., description="Income for the month, e.g. 1000.00")
    month: str = Field(..., description="Full month name, e.g. March")
    year: int

class IncomeUpdate(BaseModel):
    amount: Optional[Decimal] = None
    month: Optional[str] = None
    year: Optional[int] = None

class IncomeRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: Money
    month: str
    year: int
    is_locked: bool
    created_at: datetime

    class Config:
        from_attributes = True
