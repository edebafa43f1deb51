from datetime import UTC, datetime

from pydantic import field_serializer
from sqlmodel import SQLModel


class AvailableSlot(SQLModel):
    """A free [start_datetime, end_datetime) window. Derived on demand, never stored."""

    start_datetime: datetime
    end_datetime: datetime

    @field_serializer("start_datetime", "end_datetime", when_used="json")
    def _as_utc(self, value: datetime) -> str:
        # Stored values are naive UTC; emit them with a Z suffix
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).isoformat().replace("+00:00", "Z")
