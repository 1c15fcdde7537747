from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_clock():
    """Dependency returning the clock used by the handler; overridden in tests."""
    return utcnow
