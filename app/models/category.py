# app/models/category.py
import uuid
from sqlalchemy import Column, String, ForeignKey, DateTime, Index, Uuid, func
from app.core.database import Base
from app.core.security import utcnow

class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Stored as typed; uniqueness per user ignores case
    name = Column(String(length=100), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Category name={self.name} user_id={self.user_id}>"


Index("uq_categories_user_id_lower_name", Category.user_id, func.lower(Category.name), unique=True)
