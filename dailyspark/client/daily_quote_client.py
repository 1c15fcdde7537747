"""HTTP client and client-local storage for the daily quote handler."""

import json
import logging
import random
import string
import time
from pathlib import Path
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"
DAILY_QUOTE_PATH = "/get-daily-quote"

_BASE36 = string.digits + string.ascii_lowercase


class QuoteFetchError(Exception):
    """The handler could not be reached or returned an unusable response. Safe to retry."""


def generate_session_id(now_ms: Optional[int] = None, rng: Optional[random.Random] = None) -> str:
    """
    Builds a session token from a millisecond timestamp and a random base-36
    suffix, e.g. ``session_1760700000000_k3j9x0a2b``. Not collision resistant.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join((rng or random).choice(_BASE36) for _ in range(9))
    return f"session_{now_ms}_{suffix}"


class LocalStore:
    """
    String key-value store persisted as a JSON object on disk.

    With ``path=None`` the store lives only in memory.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        self._data: dict[str, str] = {}
        if self.path is not None and self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except ValueError:
                data = None
            if isinstance(data, dict):
                self._data = data
            else:
                logger.warning("Ignoring unreadable client state at %s", self.path)

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")


class DailyQuoteClient:
    """Calls the daily quote handler over HTTP."""

    def __init__(self, http_client: httpx.Client, path: str = DAILY_QUOTE_PATH):
        self.http_client = http_client
        self.path = path

    @classmethod
    def from_url(cls, api_url: str = DEFAULT_API_URL, timeout: float = 10.0) -> "DailyQuoteClient":
        return cls(httpx.Client(base_url=api_url, timeout=timeout))

    def fetch(self, session_id: str) -> dict:
        """
        Requests the session's quote of the day.

        Returns:
            The decoded ``{"quote", "expiresAt", "isNew"}`` payload.

        Raises:
            QuoteFetchError: on network failures, non-2xx responses or a
                payload that is not the expected shape.
        """
        try:
            response = self.http_client.post(self.path, json={"sessionId": session_id})
        except httpx.HTTPError as e:
            raise QuoteFetchError(f"Could not reach the quote service: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise QuoteFetchError(f"Invalid response from the quote service: {e}") from e

        if response.is_error:
            message = payload.get("error") if isinstance(payload, dict) else None
            raise QuoteFetchError(message or f"Quote service returned {response.status_code}")

        if not isinstance(payload, dict) or not {"quote", "expiresAt", "isNew"} <= payload.keys():
            raise QuoteFetchError("Invalid response from the quote service")

        return payload

    def close(self) -> None:
        self.http_client.close()
