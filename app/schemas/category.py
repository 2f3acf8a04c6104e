# app/schemas/category.py
from datetime import datetime
from pydantic import BaseModel
import uuid

class CategoryCreate(BaseModel):
    name: str

class CategoryRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    created_at: datetime

    class Config:
        from_attributes = True
