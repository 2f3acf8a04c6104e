# app/models/user.py
import uuid
from sqlalchemy import Column, String, DateTime, Uuid
from app.core.database import Base
from app.core.security import utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(length=50), unique=True, index=True, nullable=False)
    # Nullable only for accounts created before email was required; see backfill_missing_emails
    email = Column(String(length=255), unique=True, index=True, nullable=True)
    hashed_password = Column(String(length=1024), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User username={self.username} id={self.id}>"
