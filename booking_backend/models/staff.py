from datetime import datetime, time

from sqlmodel import Field, SQLModel

from booking_backend.models.common import naive_datetime_field, new_id, utc_naive_now


class StaffMember(SQLModel, table=True):
    __tablename__ = "staff_members"
    staff_member_id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.business_id", index=True)
    staff_member_name: str
    staff_member_is_active: bool = True


class StaffService(SQLModel, table=True):
    """Bookable items a staff member can provide. Both sides belong to the same business."""

    __tablename__ = "staff_services"
    staff_member_id: str = Field(foreign_key="staff_members.staff_member_id", primary_key=True)
    bookable_item_id: str = Field(foreign_key="bookable_items.bookable_item_id", primary_key=True, index=True)
    created_at: datetime = naive_datetime_field(default_factory=utc_naive_now)


class StaffAvailability(SQLModel, table=True):
    """Weekly working window. day_of_week is Sunday-based like business hours."""

    __tablename__ = "staff_availability"
    staff_availability_id: str = Field(default_factory=new_id, primary_key=True)
    staff_member_id: str = Field(foreign_key="staff_members.staff_member_id", index=True)
    day_of_week: int = Field(ge=0, le=6)
    start_time: time
    end_time: time
    created_at: datetime = naive_datetime_field(default_factory=utc_naive_now)
    updated_at: datetime = naive_datetime_field(default_factory=utc_naive_now)
