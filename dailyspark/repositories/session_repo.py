# repositories/session_repo.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dailyspark.models.orm.session import UserSessionORM

logger = logging.getLogger(__name__)


class SessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_session(self, session_id: str) -> Optional[UserSessionORM]:
        """Point lookup of a client session by its opaque identifier."""
        stmt = select(UserSessionORM).where(UserSessionORM.session_id == session_id)
        return self.db.scalars(stmt).one_or_none()

    def ensure_session(self, session_id: str) -> bool:
        """
        Creates the session record if it does not exist yet.

        Returns True when a new record was inserted. A failed insert (e.g. a
        concurrent request created the same session first) is rolled back and
        logged; callers keep using ``session_id`` as the filter key regardless.
        """
        if self.get_session(session_id) is not None:
            return False

        logger.info("Creating new session: %s", session_id)
        try:
            self.db.add(UserSessionORM(session_id=session_id))
            self.db.commit()
            return True
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Session %s already created concurrently: %s", session_id, e.orig)
            return False
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Could not create session %s: %s", session_id, e)
            return False
