from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from booking_backend.models.common import naive_datetime_field, new_id, utc_naive_now


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(SQLModel, table=True):
    """A reservation of one bookable item for [start, end) within a business."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("booking_end_datetime > booking_start_datetime", name="ck_bookings_interval"),
        CheckConstraint("booking_unit_count >= 1", name="ck_bookings_unit_count"),
    )
    booking_id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.business_id", index=True)
    bookable_item_id: str = Field(foreign_key="bookable_items.bookable_item_id", index=True)
    staff_member_id: str | None = Field(default=None, foreign_key="staff_members.staff_member_id", index=True)
    booking_start_datetime: datetime = naive_datetime_field(index=True)
    booking_end_datetime: datetime = naive_datetime_field()
    booking_status_code: str = Field(default=BookingStatus.PENDING.value, index=True)
    booking_unit_count: int = Field(default=1, ge=1)
    cancellation_reason: str | None = None
    created_at: datetime = naive_datetime_field(default_factory=utc_naive_now)
    updated_at: datetime = naive_datetime_field(default_factory=utc_naive_now)


class BookingCreate(SQLModel):
    business_id: str
    bookable_item_id: str
    staff_member_id: str | None = None
    booking_start_datetime: datetime
    booking_end_datetime: datetime
    booking_unit_count: int = 1


class BookingPublic(SQLModel):
    booking_id: str
    business_id: str
    bookable_item_id: str
    staff_member_id: str | None = None
    booking_start_datetime: datetime
    booking_end_datetime: datetime
    booking_status_code: str
    booking_unit_count: int
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime
