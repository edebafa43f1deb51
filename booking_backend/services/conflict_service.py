from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.core.config import settings
from booking_backend.models.booking import ACTIVE_STATUSES, Booking


def conflicting_bookings_query(
    business_id: str,
    start: datetime,
    end: datetime,
    bookable_item_id: str | None = None,
):
    q = select(Booking.booking_id).where(
        Booking.business_id == business_id,
        Booking.booking_start_datetime <= end,
        Booking.booking_end_datetime >= start,
    )
    if settings.booking_conflict_scope == "bookable_item" and bookable_item_id is not None:
        q = q.where(Booking.bookable_item_id == bookable_item_id)
    if settings.conflict_excludes_cancelled:
        q = q.where(Booking.booking_status_code.in_(ACTIVE_STATUSES))
    return q


async def has_conflict(
    session: AsyncSession,
    business_id: str,
    start: datetime,
    end: datetime,
    bookable_item_id: str | None = None,
) -> bool:
    """True if any existing booking for the business overlaps [start, end].

    By default the scope is the whole business and cancelled bookings still
    count; both are controlled by settings (booking_conflict_scope,
    conflict_excludes_cancelled).
    """
    q = conflicting_bookings_query(business_id, start, end, bookable_item_id).limit(1)
    result = await session.execute(q)
    return result.first() is not None
