from datetime import datetime, time

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field, SQLModel

from booking_backend.models.common import naive_datetime_field, new_id, utc_naive_now


class Business(SQLModel, table=True):
    __tablename__ = "businesses"
    business_id: str = Field(default_factory=new_id, primary_key=True)
    business_name: str
    business_timezone: str = "UTC"
    created_at: datetime = naive_datetime_field(default_factory=utc_naive_now)
    updated_at: datetime = naive_datetime_field(default_factory=utc_naive_now)


class BusinessHours(SQLModel, table=True):
    """Weekly opening window. day_of_week is Sunday-based (0=Sunday .. 6=Saturday)."""

    __tablename__ = "business_hours"
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_business_hours_day"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_business_hours_day_of_week"),
        CheckConstraint("end_time > start_time", name="ck_business_hours_window"),
    )
    business_hours_id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.business_id", index=True)
    day_of_week: int = Field(ge=0, le=6)
    start_time: time
    end_time: time
