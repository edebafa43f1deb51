from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from booking_backend.models.common import naive_datetime_field, new_id, utc_naive_now


class BookableItemType(str, Enum):
    SERVICE = "service"
    RESOURCE = "resource"
    EVENT = "event"
    TEACHING = "teaching"
    TABLE = "table"
    ROOM = "room"


class BookableItem(SQLModel, table=True):
    __tablename__ = "bookable_items"
    __table_args__ = (
        CheckConstraint(
            "bookable_item_type_code IN ('service', 'resource', 'event', 'teaching', 'table', 'room')",
            name="ck_bookable_items_type_code",
        ),
    )
    bookable_item_id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.business_id", index=True)
    bookable_item_type_code: str = BookableItemType.SERVICE.value
    bookable_item_name: str
    bookable_item_description: str | None = None
    bookable_item_duration: str  # "01:00:00", "PT1H" or minutes
    bookable_item_price: float | None = None
    is_active: bool = True
    created_at: datetime = naive_datetime_field(default_factory=utc_naive_now)
    updated_at: datetime = naive_datetime_field(default_factory=utc_naive_now)
