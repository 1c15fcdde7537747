"""Shared fixtures: an in-memory database, a controllable clock and an API client."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dailyspark.core.clock import get_clock
from dailyspark.core.db import get_db, init_db
from dailyspark.main import app
from dailyspark.models.orm.quote import QuoteORM

START = datetime(2026, 10, 17, 9, 0, 0)


class FakeClock:
    """Naive-UTC clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest.fixture
def add_quotes(db):
    """Insert quotes with the given ids; text is derived from the id."""

    def _add(*quote_ids: str, author: str | None = "Anonymous"):
        quotes = [QuoteORM(id=qid, text=f"Quote {qid}", author=author) for qid in quote_ids]
        db.add_all(quotes)
        db.commit()
        return quotes

    return _add


@pytest.fixture
def client(session_factory, clock):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()
