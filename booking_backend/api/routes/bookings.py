import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.api.deps import get_session, require_api_key
from booking_backend.api.schemas.booking import CreateBookingRequest, CreateBookingResponse
from booking_backend.models.booking import Booking, BookingCreate, BookingPublic
from booking_backend.services.booking_service import (
    cancel_booking,
    complete_booking,
    confirm_booking,
    create_booking,
    get_booking,
    list_bookings_for_business,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["bookings"], dependencies=[Depends(require_api_key)])


def _to_public(b: Booking) -> BookingPublic:
    return BookingPublic.model_validate(b)


@router.post("/bookings", response_model=CreateBookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_route(
    body: CreateBookingRequest,
    session: AsyncSession = Depends(get_session),
) -> CreateBookingResponse:
    data = BookingCreate(
        business_id=str(body.business_id),
        bookable_item_id=str(body.bookable_item_id),
        staff_member_id=str(body.staff_member_id) if body.staff_member_id else None,
        booking_start_datetime=body.booking_start_datetime,
        booking_end_datetime=body.booking_end_datetime,
        booking_unit_count=body.booking_unit_count,
    )
    booking = await create_booking(session, data)
    return CreateBookingResponse(booking_id=booking.booking_id)


@router.get("/bookings/{booking_id}", response_model=BookingPublic)
async def get_booking_route(
    booking_id: str,
    session: AsyncSession = Depends(get_session),
) -> BookingPublic:
    return _to_public(await get_booking(session, booking_id))


@router.get("/businesses/{business_id}/bookings", response_model=list[BookingPublic])
async def list_business_bookings(
    business_id: str,
    limit: int = Query(10, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> list[BookingPublic]:
    bookings = await list_bookings_for_business(session, business_id, limit=limit)
    return [_to_public(b) for b in bookings]


@router.post("/bookings/{booking_id}/confirm", response_model=BookingPublic)
async def confirm_booking_route(
    booking_id: str,
    session: AsyncSession = Depends(get_session),
) -> BookingPublic:
    return _to_public(await confirm_booking(session, booking_id))


@router.post("/bookings/{booking_id}/complete", response_model=BookingPublic)
async def complete_booking_route(
    booking_id: str,
    session: AsyncSession = Depends(get_session),
) -> BookingPublic:
    return _to_public(await complete_booking(session, booking_id))


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking_route(
    booking_id: str,
    cancellation_reason: str | None = Query(None, max_length=500),
    session: AsyncSession = Depends(get_session),
) -> None:
    await cancel_booking(session, booking_id, cancellation_reason=cancellation_reason)
