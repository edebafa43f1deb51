from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    business_id: UUID
    bookable_item_id: UUID
    staff_member_id: UUID | None = None
    booking_start_datetime: datetime
    booking_end_datetime: datetime
    booking_unit_count: int = Field(ge=1)


class CreateBookingResponse(BaseModel):
    booking_id: str
