import uuid

from sqlalchemy import Column, String, DateTime

from dailyspark.core.clock import utcnow
from .base import Base


class UserSessionORM(Base):
    __tablename__ = "user_sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    # Opaque identifier generated by the client
    session_id = Column(String, nullable=False, unique=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
