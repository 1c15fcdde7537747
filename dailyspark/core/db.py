import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dailyspark.core.settings import config_settings
from dailyspark.models.orm.base import Base

logger = logging.getLogger(__name__)

DATABASE_URL = config_settings.DATABASE_URL

# 1. SQLAlchemy Engine
# Manages the connection pool and dialect for the whole process.
engine = create_engine(
    DATABASE_URL,
    # Only needed for SQLite to handle concurrent requests
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {}
)

# 2. SessionLocal
# Each request gets its own session (a unit of work).
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create the quotes, user_sessions and daily_quotes tables if missing."""
    # Register every mapped class on Base.metadata before create_all
    from dailyspark.models.orm import assignment, quote, session  # noqa: F401

    bind = bind or engine
    logger.info("Creating tables on %s", bind.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=bind)


def get_db():
    """
    Dependency that yields a database session for a single request,
    and ensures the session is closed afterward.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
