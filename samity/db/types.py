"""Custom SQLAlchemy types."""
from datetime import datetime, timezone
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the form stored in the database)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class UTCDateTime(TypeDecorator):
    """DateTime column that always stores and returns naive UTC values.

    SQLite drops timezone information, while callers may hand us aware
    datetimes parsed from ISO strings. Normalising on bind keeps every
    stored timestamp comparable with every other one.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Normalise aware datetimes to naive UTC when binding."""
        if value is None:
            return None
        return to_naive_utc(value)

    def process_result_value(self, value, dialect):
        return value
