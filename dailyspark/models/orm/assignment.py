import uuid

from sqlalchemy import Column, String, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship

from .base import Base


class DailyAssignmentORM(Base):
    """One issuance of a quote to a session. Rows are inserted, never updated."""

    __tablename__ = "daily_quotes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Not a foreign key: the session id is used even when the session insert failed
    session_id = Column(String, nullable=False, index=True)
    quote_id = Column(String, ForeignKey("quotes.id"), nullable=False)

    shown_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    __table_args__ = (
        Index("ix_daily_quotes_session_shown_at", "session_id", "shown_at"),
    )

    quote = relationship("QuoteORM")
