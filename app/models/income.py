# app/models/income.py
import uuid
from sqlalchemy import Column, String, ForeignKey, Numeric, Boolean, DateTime, Integer, Uuid
from app.core.database import Base
from app.core.security import utcnow

class Income(Base):
    __tablename__ = "incomes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    # Full English month name, e.g. "March"
    month = Column(String(length=9), nullable=False)
    year = Column(Integer, nullable=False)
    # One-way: once locked, amount/month/year never change again
    is_locked = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Income amount={self.amount} {self.month}/{self.year} locked={self.is_locked} user_id={self.user_id}>"
