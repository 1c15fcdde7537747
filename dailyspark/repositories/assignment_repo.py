# repositories/assignment_repo.py
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from dailyspark.models.orm.assignment import DailyAssignmentORM

logger = logging.getLogger(__name__)


class AssignmentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_active_assignment(
        self, session_id: str, now: datetime
    ) -> Optional[DailyAssignmentORM]:
        """
        Returns the session's most recently shown assignment that has not
        expired at ``now``, with its quote eagerly loaded.

        More than one active row should not exist, but if it does the latest
        ``shown_at`` wins.
        """
        stmt = (
            select(DailyAssignmentORM)
            .where(
                DailyAssignmentORM.session_id == session_id,
                DailyAssignmentORM.expires_at >= now,
            )
            .options(joinedload(DailyAssignmentORM.quote))
            .order_by(DailyAssignmentORM.shown_at.desc())
            .limit(1)
        )
        return self.db.scalars(stmt).first()

    def get_recent_quote_ids(self, session_id: str, limit: int) -> list[str]:
        """Quote ids of the session's last ``limit`` assignments, newest first."""
        stmt = (
            select(DailyAssignmentORM.quote_id)
            .where(DailyAssignmentORM.session_id == session_id)
            .order_by(DailyAssignmentORM.shown_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())

    def create_assignment(
        self, session_id: str, quote_id: str, shown_at: datetime, expires_at: datetime
    ) -> DailyAssignmentORM:
        """
        Inserts a new assignment row. Prior assignments are left untouched.
        Note: The DailyQuoteService must ensure no other assignment is active.
        """
        try:
            db_assignment = DailyAssignmentORM(
                session_id=session_id,
                quote_id=quote_id,
                shown_at=shown_at,
                expires_at=expires_at,
            )

            self.db.add(db_assignment)
            self.db.commit()
            self.db.refresh(db_assignment)

            return db_assignment

        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Exception occurred creating assignment for session %s", session_id)
            raise
