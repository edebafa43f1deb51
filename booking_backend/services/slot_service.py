"""Available slot computation for a bookable item over a date range.

Each day is cut into fixed-width candidate slots between the business's opening
and closing time. A slot is offered unless it overlaps an existing booking that
starts on the same calendar day (half-open test: slot_start < booking_end and
slot_end > booking_start).
"""

import logging
import re
from collections.abc import Iterable, Iterator
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.core.config import settings
from booking_backend.core.errors import BadRequestError, NotFoundError
from booking_backend.models.bookable_item import BookableItem
from booking_backend.models.booking import Booking
from booking_backend.models.business import BusinessHours
from booking_backend.models.slot import AvailableSlot

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CLOCK_DURATION_RE = re.compile(r"^(\d{1,2}):([0-5]\d)(?::([0-5]\d))?$")
_ISO_DURATION_RE = re.compile(r"^PT(?=\d)(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$", re.IGNORECASE)

# Opening window for one day, as offsets from local midnight
DayWindow = tuple[timedelta, timedelta]
BookedInterval = tuple[datetime, datetime]


def parse_date_param(value: str, name: str) -> date:
    if not _DATE_RE.match(value):
        raise BadRequestError(
            "Invalid date format, expected YYYY-MM-DD",
            details={"param": name, "value": value},
        )
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequestError(
            "Invalid calendar date",
            details={"param": name, "value": value},
        ) from None


def parse_duration(value: str | None) -> timedelta | None:
    """Parse "HH:MM[:SS]", ISO-8601 "PT1H30M" or a bare number of minutes."""
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        minutes = int(value)
        return timedelta(minutes=minutes) if minutes > 0 else None
    m = _CLOCK_DURATION_RE.match(value)
    if m:
        hours, minutes, seconds = (int(g or 0) for g in m.groups())
    else:
        m = _ISO_DURATION_RE.match(value)
        if not m:
            return None
        hours, minutes, seconds = (int(g or 0) for g in m.groups())
    delta = timedelta(hours=hours, minutes=minutes, seconds=seconds)
    return delta if delta > timedelta(0) else None


def sunday_based_weekday(d: date) -> int:
    """0=Sunday .. 6=Saturday, the day_of_week convention of business hours."""
    return (d.weekday() + 1) % 7


def _offset(t: time) -> timedelta:
    return timedelta(hours=t.hour, minutes=t.minute, seconds=t.second)


def default_window() -> DayWindow:
    return timedelta(hours=settings.business_start_hour), timedelta(hours=settings.business_end_hour)


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def is_overlapping(slot_start: datetime, slot_end: datetime, booked: BookedInterval) -> bool:
    booked_start, booked_end = booked
    return slot_start < booked_end and slot_end > booked_start


def iter_available_slots(
    days: Iterable[tuple[date, DayWindow]],
    bookings: list[BookedInterval],
    width: timedelta,
) -> Iterator[tuple[datetime, datetime]]:
    """Lazily yield free (start, end) pairs in chronological order.

    Bookings are matched to a day by the calendar date of their start, so a
    booking that crosses midnight only blocks slots on its first day.
    Raises ValueError up front for a non-positive width.
    """
    if width <= timedelta(0):
        raise ValueError(f"Slot width must be positive, got {width}")
    return _free_slots(days, bookings, width)


def _free_slots(
    days: Iterable[tuple[date, DayWindow]],
    bookings: list[BookedInterval],
    width: timedelta,
) -> Iterator[tuple[datetime, datetime]]:
    for d, (opens, closes) in days:
        midnight = datetime(d.year, d.month, d.day)
        day_start = midnight + opens
        day_end = midnight + closes
        booked_today = [b for b in bookings if b[0].date() == d]
        slot_start = day_start
        while slot_start < day_end:
            slot_end = slot_start + width
            if slot_end > day_end:
                break
            if not any(is_overlapping(slot_start, slot_end, b) for b in booked_today):
                yield slot_start, slot_end
            slot_start = slot_end


def slot_width_for(item: BookableItem) -> timedelta:
    fixed = timedelta(minutes=settings.slot_minutes)
    if not settings.slot_width_from_item_duration:
        return fixed
    width = parse_duration(item.bookable_item_duration)
    if width is None:
        logger.warning(
            "Unparseable duration %r on bookable item %s; using %d-minute slots",
            item.bookable_item_duration,
            item.bookable_item_id,
            settings.slot_minutes,
        )
        return fixed
    return width


async def get_business_hours(session: AsyncSession, business_id: str) -> dict[int, DayWindow]:
    result = await session.execute(
        select(BusinessHours).where(BusinessHours.business_id == business_id)
    )
    return {
        h.day_of_week: (_offset(h.start_time), _offset(h.end_time))
        for h in result.scalars().all()
    }


async def get_bookings_within_dates(
    session: AsyncSession, business_id: str, start_date: date, end_date: date
) -> list[BookedInterval]:
    """Bookings whose start date is on/after start_date and end date on/before end_date.

    Status is not filtered, so cancelled bookings still block their slots.
    """
    range_start = datetime(start_date.year, start_date.month, start_date.day)
    range_end = datetime(end_date.year, end_date.month, end_date.day) + timedelta(days=1)
    result = await session.execute(
        select(Booking.booking_start_datetime, Booking.booking_end_datetime)
        .where(
            Booking.business_id == business_id,
            Booking.booking_start_datetime >= range_start,
            Booking.booking_end_datetime < range_end,
        )
        .order_by(Booking.booking_start_datetime)
    )
    return [(row[0], row[1]) for row in result.all()]


async def compute_available_slots(
    session: AsyncSession, bookable_item_id: str, start_date: str, end_date: str
) -> list[AvailableSlot]:
    """Free slots for the item's business between start_date and end_date inclusive."""
    first_day = parse_date_param(start_date, "start_date")
    last_day = parse_date_param(end_date, "end_date")

    item = await session.get(BookableItem, bookable_item_id)
    if item is None:
        raise NotFoundError.for_resource("Bookable item", bookable_item_id)

    if last_day < first_day:
        return []
    span = (last_day - first_day).days + 1
    if span > settings.max_slot_range_days:
        raise BadRequestError(
            f"Date range too long: {span} days (max {settings.max_slot_range_days})"
        )

    hours = await get_business_hours(session, item.business_id)
    bookings = await get_bookings_within_dates(session, item.business_id, first_day, last_day)
    fallback = default_window()
    days = [(d, hours.get(sunday_based_weekday(d), fallback)) for d in iter_days(first_day, last_day)]

    slots = [
        AvailableSlot(start_datetime=s, end_datetime=e)
        for s, e in iter_available_slots(days, bookings, slot_width_for(item))
    ]
    logger.debug(
        "Computed %d slot(s) for item %s from %s to %s",
        len(slots),
        bookable_item_id,
        first_day,
        last_day,
    )
    return slots
