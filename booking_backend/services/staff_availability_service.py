from datetime import datetime, time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.core.errors import BadRequestError, NotFoundError
from booking_backend.models.bookable_item import BookableItem
from booking_backend.models.booking import ACTIVE_STATUSES, Booking
from booking_backend.models.common import to_naive_utc
from booking_backend.models.staff import StaffAvailability, StaffMember, StaffService
from booking_backend.services.slot_service import sunday_based_weekday


async def list_staff_availability(session: AsyncSession, staff_member_id: str) -> list[StaffAvailability]:
    result = await session.execute(
        select(StaffAvailability)
        .where(StaffAvailability.staff_member_id == staff_member_id)
        .order_by(StaffAvailability.day_of_week, StaffAvailability.start_time)
    )
    return list(result.scalars().all())


async def create_staff_availability(
    session: AsyncSession,
    staff_member_id: str,
    day_of_week: int,
    start_time: time,
    end_time: time,
) -> StaffAvailability:
    if await session.get(StaffMember, staff_member_id) is None:
        raise BadRequestError("Staff member does not exist", details={"staff_member_id": staff_member_id})
    if end_time <= start_time:
        raise BadRequestError("End time must be later than start time")

    same_day = [a for a in await list_staff_availability(session, staff_member_id) if a.day_of_week == day_of_week]
    for existing in same_day:
        if start_time < existing.end_time and end_time > existing.start_time:
            raise BadRequestError(
                "Availability overlaps an existing rule for this day",
                details={"staff_availability_id": existing.staff_availability_id},
            )

    availability = StaffAvailability(
        staff_member_id=staff_member_id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
    )
    session.add(availability)
    await session.flush()
    await session.refresh(availability)
    return availability


async def find_available_staff(
    session: AsyncSession,
    business_id: str,
    bookable_item_id: str,
    start: datetime,
    end: datetime,
) -> list[tuple[StaffMember, StaffAvailability]]:
    """Active staff who provide the item, work on start's weekday across the whole
    [start, end] window and have no pending/confirmed booking overlapping it.

    The overlap test is the same closed-interval test used for booking conflicts.
    """
    item = await session.get(BookableItem, bookable_item_id)
    if item is None or item.business_id != business_id:
        raise NotFoundError(
            "Bookable item not found for business",
            details={"business_id": business_id, "bookable_item_id": bookable_item_id},
        )
    start = to_naive_utc(start)
    end = to_naive_utc(end)
    if end <= start:
        raise BadRequestError("End time must be later than start time")

    busy = select(Booking.staff_member_id).where(
        Booking.staff_member_id.is_not(None),
        Booking.booking_status_code.in_(ACTIVE_STATUSES),
        Booking.booking_start_datetime <= end,
        Booking.booking_end_datetime >= start,
    )
    result = await session.execute(
        select(StaffMember, StaffAvailability)
        .join(StaffService, StaffService.staff_member_id == StaffMember.staff_member_id)
        .join(StaffAvailability, StaffAvailability.staff_member_id == StaffMember.staff_member_id)
        .where(
            StaffMember.business_id == business_id,
            StaffMember.staff_member_is_active.is_(True),
            StaffService.bookable_item_id == bookable_item_id,
            StaffAvailability.day_of_week == sunday_based_weekday(start.date()),
            StaffAvailability.start_time <= start.time(),
            StaffAvailability.end_time >= end.time(),
            StaffMember.staff_member_id.not_in(busy),
        )
        .order_by(StaffMember.staff_member_name, StaffAvailability.start_time)
    )
    return [(staff, availability) for staff, availability in result.all()]
