import uuid

from sqlalchemy import Column, String, DateTime, Text

from dailyspark.core.clock import utcnow
from .base import Base


class QuoteORM(Base):
    __tablename__ = "quotes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    text = Column(Text, nullable=False)
    # Anonymous quotes have no author
    author = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
