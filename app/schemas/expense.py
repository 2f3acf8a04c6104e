# app/schemas/expense.py
import datetime as dt
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
import uuid

from app.schemas.common import Money

class ExpenseCreate(BaseModel):
    amount: Decimal = Field(..., description="Amount spent")
    category_id: uuid.UUID
    date: dt.date = Field(..., description="Calendar date of the expense")

class ExpenseRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: Money
    category_id: uuid.UUID
    category_name: Optional[str] = None
    date: dt.date
    created_at: dt.datetime

    class Config:
        from_attributes = True
