import asyncio
import logging
import weakref
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.core.config import settings
from booking_backend.core.errors import BadRequestError, NotFoundError
from booking_backend.models.bookable_item import BookableItem
from booking_backend.models.booking import Booking, BookingCreate, BookingStatus
from booking_backend.models.business import Business
from booking_backend.models.common import to_naive_utc, utc_naive_now
from booking_backend.models.staff import StaffMember
from booking_backend.services.conflict_service import has_conflict
from booking_backend.services.staff_assignment_service import can_provide

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_REASON = "Customer cancelled"

# Allowed source states for each explicit transition
_TRANSITIONS: dict[BookingStatus, tuple[BookingStatus, ...]] = {
    BookingStatus.CONFIRMED: (BookingStatus.PENDING,),
    BookingStatus.COMPLETED: (BookingStatus.CONFIRMED,),
    BookingStatus.CANCELLED: (BookingStatus.PENDING, BookingStatus.CONFIRMED),
}

# One lock per business serializes conflict-check + insert + commit.
# Entries vanish once no coroutine holds a reference to the lock.
_business_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def business_lock(business_id: str) -> asyncio.Lock:
    lock = _business_locks.get(business_id)
    if lock is None:
        lock = asyncio.Lock()
        _business_locks[business_id] = lock
    return lock


async def get_booking(session: AsyncSession, booking_id: str) -> Booking:
    booking = await session.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError.for_resource("Booking", booking_id)
    return booking


async def list_bookings_for_business(
    session: AsyncSession, business_id: str, limit: int = 10
) -> list[Booking]:
    q = (
        select(Booking)
        .where(Booking.business_id == business_id)
        .order_by(Booking.booking_start_datetime)
        .limit(limit)
    )
    result = await session.execute(q)
    return list(result.scalars().all())


async def _check_staff_assignment(session: AsyncSession, data: BookingCreate) -> None:
    staff = await session.get(StaffMember, data.staff_member_id)
    if staff is None or staff.business_id != data.business_id:
        raise BadRequestError("Staff member does not exist", details={"staff_member_id": data.staff_member_id})
    if not await can_provide(session, data.staff_member_id, data.bookable_item_id):
        raise BadRequestError(
            "Staff member cannot provide this bookable item",
            details={"staff_member_id": data.staff_member_id, "bookable_item_id": data.bookable_item_id},
        )


async def create_booking(session: AsyncSession, data: BookingCreate) -> Booking:
    """Validate references and interval, reject conflicts, insert as pending.

    The conflict check and the insert run under the business lock and the
    row is committed before the lock is released, so two concurrent requests
    in this process cannot both pass the check for overlapping intervals.
    """
    if await session.get(Business, data.business_id) is None:
        raise BadRequestError("Business does not exist", details={"business_id": data.business_id})
    if await session.get(BookableItem, data.bookable_item_id) is None:
        raise BadRequestError(
            "Bookable item does not exist", details={"bookable_item_id": data.bookable_item_id}
        )
    if data.staff_member_id is not None:
        await _check_staff_assignment(session, data)

    start = to_naive_utc(data.booking_start_datetime)
    end = to_naive_utc(data.booking_end_datetime)
    if end <= start:
        raise BadRequestError("Booking end time must be later than start time")
    if data.booking_unit_count < 1:
        raise BadRequestError("Booking unit count must be at least 1")

    async with business_lock(data.business_id):
        if await has_conflict(session, data.business_id, start, end, data.bookable_item_id):
            raise BadRequestError("Time slot already booked")
        booking = Booking(
            business_id=data.business_id,
            bookable_item_id=data.bookable_item_id,
            staff_member_id=data.staff_member_id,
            booking_start_datetime=start,
            booking_end_datetime=end,
            booking_status_code=BookingStatus.PENDING.value,
            booking_unit_count=data.booking_unit_count,
        )
        session.add(booking)
        await session.commit()
    await session.refresh(booking)
    logger.info(
        "Created booking %s for business %s [%s, %s)",
        booking.booking_id,
        booking.business_id,
        start.isoformat(),
        end.isoformat(),
    )
    return booking


def _check_transition(booking: Booking, target: BookingStatus) -> None:
    current = BookingStatus(booking.booking_status_code)
    if current in _TRANSITIONS[target]:
        return
    if current == BookingStatus.CANCELLED:
        raise BadRequestError("Booking is already cancelled")
    if current == BookingStatus.COMPLETED:
        raise BadRequestError("Booking is already completed")
    raise BadRequestError(f"Cannot change booking from {current.value} to {target.value}")


async def cancel_booking(
    session: AsyncSession,
    booking_id: str,
    cancellation_reason: str | None = None,
    now: datetime | None = None,
) -> Booking:
    """Cancel a pending/confirmed booking at least cancellation_window_hours before it starts."""
    booking = await get_booking(session, booking_id)
    _check_transition(booking, BookingStatus.CANCELLED)

    now = to_naive_utc(now) if now else utc_naive_now()
    hours_until_start = (booking.booking_start_datetime - now) / timedelta(hours=1)
    if hours_until_start < settings.cancellation_window_hours:
        raise BadRequestError(
            f"Bookings can only be cancelled at least {settings.cancellation_window_hours} hours before they start"
        )

    booking.booking_status_code = BookingStatus.CANCELLED.value
    booking.cancellation_reason = cancellation_reason or DEFAULT_CANCELLATION_REASON
    booking.updated_at = now
    session.add(booking)
    await session.flush()
    logger.info("Cancelled booking %s (%s)", booking_id, booking.cancellation_reason)
    return booking


async def _transition(session: AsyncSession, booking_id: str, target: BookingStatus) -> Booking:
    booking = await get_booking(session, booking_id)
    _check_transition(booking, target)
    booking.booking_status_code = target.value
    booking.updated_at = utc_naive_now()
    session.add(booking)
    await session.flush()
    logger.info("Booking %s is now %s", booking_id, target.value)
    return booking


async def confirm_booking(session: AsyncSession, booking_id: str) -> Booking:
    return await _transition(session, booking_id, BookingStatus.CONFIRMED)


async def complete_booking(session: AsyncSession, booking_id: str) -> Booking:
    return await _transition(session, booking_id, BookingStatus.COMPLETED)


async def complete_finished_bookings(session: AsyncSession, now: datetime | None = None) -> int:
    """Mark confirmed bookings whose end has passed as completed. Returns count updated."""
    now = to_naive_utc(now) if now else utc_naive_now()
    result = await session.execute(
        update(Booking)
        .where(
            Booking.booking_status_code == BookingStatus.CONFIRMED.value,
            Booking.booking_end_datetime <= now,
        )
        .values(booking_status_code=BookingStatus.COMPLETED.value, updated_at=now)
    )
    await session.flush()
    return result.rowcount or 0
