# services/daily_quote_service.py

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.orm import Session

from dailyspark.core.clock import utcnow
from dailyspark.core.errors import (
    NoQuotesAvailableError,
    QuoteNotFoundError,
    SessionIdRequiredError,
)
from dailyspark.core.settings import config_settings
from dailyspark.models.orm.quote import QuoteORM
from dailyspark.models.schemas.quote import DailyQuoteResponseModel, QuoteModel
from dailyspark.repositories.assignment_repo import AssignmentRepository
from dailyspark.repositories.quote_repo import QuoteRepository
from dailyspark.repositories.session_repo import SessionRepository

logger = logging.getLogger(__name__)


def choose_quote_id(
    all_quote_ids: Iterable[str],
    recent_quote_ids: Iterable[str],
    rng: Optional[random.Random] = None,
) -> str:
    """
    Picks a quote id uniformly at random, avoiding recently shown ones.

    Candidates are ``all_quote_ids`` minus ``recent_quote_ids``. When every
    quote has been shown recently the full catalog is used instead, so
    repeats become acceptable rather than the selection failing.

    Raises:
        NoQuotesAvailableError: the catalog is empty.
    """
    universe = set(all_quote_ids)
    if not universe:
        raise NoQuotesAvailableError()

    candidates = universe - set(recent_quote_ids)
    if not candidates:
        candidates = universe

    # sorted() so a seeded rng gives repeatable picks
    return (rng or random).choice(sorted(candidates))


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class DailyQuoteService:
    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = utcnow,
        rng: Optional[random.Random] = None,
        window_hours: int = config_settings.ASSIGNMENT_WINDOW_HOURS,
        history_limit: int = config_settings.RECENT_HISTORY_LIMIT,
    ):
        self.session_repo = SessionRepository(db)
        self.assignment_repo = AssignmentRepository(db)
        self.quote_repo = QuoteRepository(db)
        self.clock = clock
        self.rng = rng
        self.window = timedelta(hours=window_hours)
        self.history_limit = history_limit

    def select_quote(self, session_id: str) -> QuoteORM:
        """
        Chooses a quote for the session, preferring one not among its last
        ``history_limit`` assignments.
        """
        recent_quote_ids = self.assignment_repo.get_recent_quote_ids(
            session_id, self.history_limit
        )
        all_quote_ids = self.quote_repo.get_all_quote_ids()

        quote_id = choose_quote_id(all_quote_ids, recent_quote_ids, self.rng)

        quote = self.quote_repo.get_quote(quote_id)
        if quote is None:
            raise QuoteNotFoundError(quote_id)
        return quote

    def get_daily_quote(self, session_id: Any) -> DailyQuoteResponseModel:
        """
        Returns the session's quote for the current window.

        1. Ensure the session record exists.
        2. Return the still-valid assignment if there is one (isNew=False).
        3. Otherwise select a quote, persist a new assignment expiring one
           window from now, and return it (isNew=True).
        """
        if not isinstance(session_id, str) or not session_id:
            raise SessionIdRequiredError()

        logger.info("Getting daily quote for session: %s", session_id)
        self.session_repo.ensure_session(session_id)

        now = self.clock()

        existing_assignment = self.assignment_repo.get_active_assignment(session_id, now)
        if existing_assignment:
            logger.info(
                "Returning existing quote %s for session %s",
                existing_assignment.quote_id,
                session_id,
            )
            return DailyQuoteResponseModel(
                quote=QuoteModel.model_validate(existing_assignment.quote),
                expiresAt=_as_utc(existing_assignment.expires_at),
                isNew=False,
            )

        # --- No active assignment, select and persist a new one ---
        quote = self.select_quote(session_id)

        new_assignment = self.assignment_repo.create_assignment(
            session_id=session_id,
            quote_id=quote.id,
            shown_at=now,
            expires_at=now + self.window,
        )
        logger.info("Assigned new quote %s to session %s", quote.id, session_id)

        return DailyQuoteResponseModel(
            quote=QuoteModel.model_validate(quote),
            expiresAt=_as_utc(new_assignment.expires_at),
            isNew=True,
        )
