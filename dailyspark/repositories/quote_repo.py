# repositories/quote_repo.py
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dailyspark.models.orm.quote import QuoteORM
from dailyspark.models.schemas.quote import QuoteSeedModel


class QuoteRepository:
    def __init__(self, db: Session):
        """Initializes the repository with a database session."""
        self.db = db

    def get_quote(self, quote_id: str) -> Optional[QuoteORM]:
        return self.db.get(QuoteORM, quote_id)

    def get_all_quote_ids(self) -> list[str]:
        """Returns the id of every quote in the catalog."""
        return list(self.db.scalars(select(QuoteORM.id)).all())

    def get_existing_texts(self) -> set[str]:
        return set(self.db.scalars(select(QuoteORM.text)).all())

    def create_quotes(self, quotes: Iterable[QuoteSeedModel]) -> list[QuoteORM]:
        """
        Inserts a batch of quotes in a single transaction.

        Args:
            quotes: Seed models with the quote text and optional author.

        Returns:
            The created QuoteORM objects.
        """
        db_quotes = [QuoteORM(**quote.model_dump()) for quote in quotes]
        try:
            self.db.add_all(db_quotes)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RuntimeError(f"A database error occurred while seeding quotes: {e}")

        return db_quotes
