# app/models/expense.py
import uuid
from sqlalchemy import Column, ForeignKey, Numeric, Date, DateTime, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.security import utcnow

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)
    date = Column(Date, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    category = relationship("Category", lazy="joined")

    @property
    def category_name(self):
        return self.category.name if self.category is not None else None

    def __repr__(self):
        return f"<Expense amount={self.amount} date={self.date} user_id={self.user_id}>"
