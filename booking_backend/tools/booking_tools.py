from datetime import datetime

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.models.booking import BookingCreate, BookingPublic
from booking_backend.services.booking_service import (
    cancel_booking,
    create_booking,
    list_bookings_for_business,
)
from booking_backend.services.slot_service import compute_available_slots
from booking_backend.tools.registry import ToolDefinition, ToolRegistry


class GetBookingsParams(BaseModel):
    business_id: str = Field(description="Business ID")
    limit: int = Field(10, ge=1, le=100, description="Maximum number of bookings to return")


class CreateBookingParams(BaseModel):
    business_id: str = Field(description="Business ID")
    bookable_item_id: str = Field(description="Bookable item ID")
    start_datetime: datetime = Field(description="Booking start, ISO 8601")
    end_datetime: datetime = Field(description="Booking end, ISO 8601")
    unit_count: int = Field(ge=1, description="Number of units booked")
    staff_member_id: str | None = Field(None, description="Optional staff member assigned to the booking")


class GetAvailableSlotsParams(BaseModel):
    bookable_item_id: str = Field(description="Bookable item ID")
    start_date: str = Field(description="First day, YYYY-MM-DD")
    end_date: str = Field(description="Last day (inclusive), YYYY-MM-DD")


class CancelBookingParams(BaseModel):
    booking_id: str = Field(description="Booking ID")
    cancellation_reason: str | None = Field(None, description="Optional cancellation reason")


async def get_bookings_tool(session: AsyncSession, params: GetBookingsParams) -> list[dict]:
    bookings = await list_bookings_for_business(session, params.business_id, limit=params.limit)
    return [BookingPublic.model_validate(b).model_dump(mode="json") for b in bookings]


async def create_booking_tool(session: AsyncSession, params: CreateBookingParams) -> dict:
    booking = await create_booking(
        session,
        BookingCreate(
            business_id=params.business_id,
            bookable_item_id=params.bookable_item_id,
            staff_member_id=params.staff_member_id,
            booking_start_datetime=params.start_datetime,
            booking_end_datetime=params.end_datetime,
            booking_unit_count=params.unit_count,
        ),
    )
    return {"booking_id": booking.booking_id}


async def get_available_slots_tool(session: AsyncSession, params: GetAvailableSlotsParams) -> list[dict]:
    slots = await compute_available_slots(session, params.bookable_item_id, params.start_date, params.end_date)
    return [s.model_dump(mode="json") for s in slots]


async def cancel_booking_tool(session: AsyncSession, params: CancelBookingParams) -> dict:
    booking = await cancel_booking(session, params.booking_id, cancellation_reason=params.cancellation_reason)
    return {"booking_id": booking.booking_id, "booking_status_code": booking.booking_status_code}


def register_booking_tools(registry: ToolRegistry) -> None:
    registry.register(
        ToolDefinition(
            name="getBookings",
            description="List bookings of a business ordered by start time",
            input_model=GetBookingsParams,
            handler=get_bookings_tool,
        )
    )
    registry.register(
        ToolDefinition(
            name="createBooking",
            description="Create a pending booking; fails if the interval conflicts with an existing booking",
            input_model=CreateBookingParams,
            handler=create_booking_tool,
        )
    )
    registry.register(
        ToolDefinition(
            name="getAvailableSlots",
            description="List free slots for a bookable item between two dates",
            input_model=GetAvailableSlotsParams,
            handler=get_available_slots_tool,
        )
    )
    registry.register(
        ToolDefinition(
            name="cancelBooking",
            description="Cancel a booking at least 24 hours before it starts",
            input_model=CancelBookingParams,
            handler=cancel_booking_tool,
        )
    )
