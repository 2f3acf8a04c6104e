# app/models/session.py
import uuid
from sqlalchemy import Column, ForeignKey, DateTime, Uuid
from app.core.database import Base
from app.core.security import utcnow

class UserSession(Base):
    """Server-side half of a login; the signed token only points at this row."""
    __tablename__ = "user_sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<UserSession id={self.id} user_id={self.user_id} expires_at={self.expires_at}>"
