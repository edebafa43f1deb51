from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field


def new_id() -> str:
    return str(uuid4())


def utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Convert to naive UTC; naive values are taken as already UTC."""
    if dt.tzinfo is not None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def naive_datetime_field(**kwargs: Any) -> Any:
    """Column stored as TIMESTAMP WITHOUT TIME ZONE holding naive UTC values.

    The column type is set explicitly so SQLModel does not pick a
    timezone-aware type that rejects naive values on insert.
    """
    return Field(sa_type=DateTime(timezone=False), **kwargs)
