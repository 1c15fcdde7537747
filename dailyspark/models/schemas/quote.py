from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuoteModel(BaseModel):
    """A quote as returned to the client."""

    id: str
    text: str
    author: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class QuoteSeedModel(BaseModel):
    """Schema for a quote loaded from seed data."""

    text: str = Field(..., min_length=1)
    author: Optional[str] = None


class DailyQuoteRequestModel(BaseModel):
    """Request body for the daily quote handler."""

    # Validated by the service so a missing id maps to a 400 with a fixed message
    sessionId: Any = None


class DailyQuoteResponseModel(BaseModel):
    quote: QuoteModel
    expiresAt: datetime = Field(..., description="UTC instant after which a new quote is assigned.")
    isNew: bool
