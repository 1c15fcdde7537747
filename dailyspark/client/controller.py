"""Display controller for the daily quote.

Keeps the UI state, the locally cached quote and the countdown. The cache is
only a display optimisation; the server stays the authority on expiry.
"""

import enum
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from dailyspark.client.daily_quote_client import (
    DailyQuoteClient,
    LocalStore,
    QuoteFetchError,
    generate_session_id,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "dailyspark_session"
QUOTE_KEY = "dailyspark_quote"
EXPIRY_KEY = "dailyspark_expiry"


class DisplayState(enum.Enum):
    NO_QUOTE = "no_quote"
    LOADING = "loading"
    QUOTE = "quote"


@dataclass(frozen=True)
class Notification:
    level: str  # "success", "info" or "error"
    title: str
    description: str


def parse_expiry(value: str) -> datetime:
    """Parses an ISO-8601 timestamp into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_countdown(remaining: timedelta) -> str:
    """Formats time left as ``Hh Mm Ss``; anything not positive is ``0h 0m 0s``."""
    total_seconds = int(remaining.total_seconds())
    if total_seconds <= 0:
        return "0h 0m 0s"
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes}m {seconds}s"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DailyQuoteController:
    def __init__(
        self,
        client: DailyQuoteClient,
        store: LocalStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.client = client
        self.store = store
        self.clock = clock

        self.state = DisplayState.NO_QUOTE
        self.quote: Optional[dict] = None
        self.expires_at: Optional[datetime] = None

    @property
    def session_id(self) -> str:
        """The persisted session token, generated on first use."""
        session_id = self.store.get(SESSION_KEY)
        if not session_id:
            session_id = generate_session_id()
            self.store.set(SESSION_KEY, session_id)
        return session_id

    @property
    def can_request(self) -> bool:
        if self.state is DisplayState.LOADING:
            return False
        return self.expires_at is None or self.expires_at <= self.clock()

    def load(self) -> DisplayState:
        """
        Restores the cached quote if it has not expired yet; otherwise clears
        the cache. Never calls the handler.
        """
        stored_quote = self.store.get(QUOTE_KEY)
        stored_expiry = self.store.get(EXPIRY_KEY)

        if stored_quote and stored_expiry:
            try:
                expiry = parse_expiry(stored_expiry)
                quote = json.loads(stored_quote)
            except (ValueError, TypeError, AttributeError):
                expiry, quote = None, None

            if not isinstance(quote, dict) or "text" not in quote:
                logger.warning("Discarding unreadable cached quote")
                expiry = None

            if expiry is not None and expiry > self.clock():
                self.quote = quote
                self.expires_at = expiry
                self.state = DisplayState.QUOTE
                return self.state

        self._clear_cache()
        return self.state

    def request_quote(self) -> Optional[Notification]:
        """
        Handles the user's request for today's quote. Returns the notification
        to show, or None when requesting is currently disabled.
        """
        if not self.can_request:
            return None

        previous_state = self.state
        self.state = DisplayState.LOADING
        try:
            response = self.client.fetch(self.session_id)
            expires_at = parse_expiry(response["expiresAt"])
        except (QuoteFetchError, ValueError, TypeError, AttributeError) as e:
            logger.error("Error fetching quote: %s", e)
            self.state = previous_state
            return Notification("error", "Oops! Something went wrong.", "Please try again in a moment.")

        self.quote = response["quote"]
        self.expires_at = expires_at
        self.state = DisplayState.QUOTE

        self.store.set(QUOTE_KEY, json.dumps(self.quote))
        self.store.set(EXPIRY_KEY, response["expiresAt"])

        if not response["isNew"]:
            return Notification("info", "Come back tomorrow for a new quote!", "This is your quote for today.")
        return Notification("success", "Here is your quote!", "A new one will be waiting for you tomorrow.")

    def time_left(self) -> str:
        """Countdown until the current quote expires; empty when there is none."""
        if self.expires_at is None:
            return ""
        return format_countdown(self.expires_at - self.clock())

    def render(self) -> str:
        if self.state is DisplayState.LOADING:
            return "Loading..."
        if self.state is DisplayState.NO_QUOTE or self.quote is None:
            return "A new motivational quote is waiting for you every day."

        lines = [f'"{self.quote["text"]}"']
        if self.quote.get("author"):
            lines.append(f"  - {self.quote['author']}")
        lines.append(f"New quote in: {self.time_left()}")
        return "\n".join(lines)

    def _clear_cache(self) -> None:
        self.store.remove(QUOTE_KEY)
        self.store.remove(EXPIRY_KEY)
        self.quote = None
        self.expires_at = None
        self.state = DisplayState.NO_QUOTE
