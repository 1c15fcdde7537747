"""Seed data for the quotes catalog.

Quotes are created outside the request path; the handler only ever reads
them. ``seed_quotes`` is idempotent, so it is safe to run on every startup.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from sqlalchemy.orm import Session

from dailyspark.models.schemas.quote import QuoteSeedModel
from dailyspark.repositories.quote_repo import QuoteRepository

logger = logging.getLogger(__name__)

DEFAULT_QUOTES: list[dict] = [
    {"text": "The secret of getting ahead is getting started.", "author": "Mark Twain"},
    {"text": "It always seems impossible until it's done.", "author": "Nelson Mandela"},
    {"text": "Well done is better than well said.", "author": "Benjamin Franklin"},
    {"text": "Act as if what you do makes a difference. It does.", "author": "William James"},
    {"text": "What you do today can improve all your tomorrows.", "author": "Ralph Marston"},
    {"text": "Quality is not an act, it is a habit.", "author": "Aristotle"},
    {"text": "Start where you are. Use what you have. Do what you can.", "author": "Arthur Ashe"},
    {"text": "Little by little, one travels far.", "author": "J.R.R. Tolkien"},
    {"text": "Believe you can and you're halfway there.", "author": "Theodore Roosevelt"},
    {"text": "Dream big and dare to fail.", "author": "Norman Vaughan"},
    {"text": "You are never too old to set another goal or to dream a new dream.", "author": "C.S. Lewis"},
    {"text": "A journey of a thousand miles begins with a single step.", "author": "Lao Tzu"},
    {"text": "Every day is a new beginning.", "author": None},
    {"text": "Small steps every day add up to big results.", "author": None},
]


def load_quotes_file(path: Path) -> list[QuoteSeedModel]:
    """Reads a JSON array of ``{"text": ..., "author": ...}`` objects."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of quotes")

    return [QuoteSeedModel.model_validate(item) for item in data]


def seed_quotes(db: Session, quotes: Iterable[QuoteSeedModel] | None = None) -> int:
    """
    Inserts quotes whose text is not already in the catalog.

    Returns:
        The number of quotes inserted.
    """
    if quotes is None:
        quotes = [QuoteSeedModel.model_validate(item) for item in DEFAULT_QUOTES]

    quote_repo = QuoteRepository(db)
    existing_texts = quote_repo.get_existing_texts()

    new_quotes = []
    for quote in quotes:
        if quote.text in existing_texts:
            continue
        existing_texts.add(quote.text)
        new_quotes.append(quote)

    if new_quotes:
        quote_repo.create_quotes(new_quotes)
    logger.info("Seeded %d new quotes (%d already present)", len(new_quotes), len(existing_texts) - len(new_quotes))
    return len(new_quotes)
