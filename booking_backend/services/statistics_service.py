from collections import Counter, defaultdict
from datetime import date, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.core.errors import NotFoundError
from booking_backend.models.bookable_item import BookableItem
from booking_backend.models.booking import Booking
from booking_backend.models.business import Business

# (booking, item price or None, item name)
_Row = tuple[Booking, float | None, str]


def _revenue(booking: Booking, price: float | None) -> float:
    if price is None:
        return 0.0
    return float(price) * booking.booking_unit_count


async def _ensure_business(session: AsyncSession, business_id: str) -> None:
    if await session.get(Business, business_id) is None:
        raise NotFoundError.for_resource("Business", business_id)


async def _bookings_starting_between(
    session: AsyncSession, business_id: str, start_date: date, end_date: date
) -> list[_Row]:
    range_start = datetime(start_date.year, start_date.month, start_date.day)
    range_end = datetime(end_date.year, end_date.month, end_date.day) + timedelta(days=1)
    result = await session.execute(
        select(Booking, BookableItem.bookable_item_price, BookableItem.bookable_item_name)
        .join(BookableItem, BookableItem.bookable_item_id == Booking.bookable_item_id, isouter=True)
        .where(
            Booking.business_id == business_id,
            Booking.booking_start_datetime >= range_start,
            Booking.booking_start_datetime < range_end,
        )
        .order_by(Booking.booking_start_datetime)
    )
    return [(b, price, name) for b, price, name in result.all()]


async def get_business_statistics(
    session: AsyncSession, business_id: str, start_date: date, end_date: date
) -> dict:
    await _ensure_business(session, business_id)
    rows = await _bookings_starting_between(session, business_id, start_date, end_date)

    daily: dict[str, dict] = defaultdict(lambda: {"total_revenue": 0.0, "total_bookings": 0})
    for booking, price, _ in rows:
        day = booking.booking_start_datetime.date().isoformat()
        daily[day]["total_revenue"] += _revenue(booking, price)
        daily[day]["total_bookings"] += 1

    return {
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "total_revenue": sum(d["total_revenue"] for d in daily.values()),
        "total_bookings": len(rows),
        "daily_statistics": [{"date": day, **daily[day]} for day in sorted(daily)],
    }


async def get_business_insights(
    session: AsyncSession, business_id: str, start_date: date, end_date: date, limit: int = 5
) -> dict:
    """Most booked items, busiest weekdays (ISO: 1=Monday .. 7=Sunday) and busiest hours."""
    await _ensure_business(session, business_id)
    rows = await _bookings_starting_between(session, business_id, start_date, end_date)

    items: dict[str, dict] = {}
    day_counts: Counter[int] = Counter()
    hour_counts: Counter[int] = Counter()
    for booking, price, name in rows:
        entry = items.setdefault(
            booking.bookable_item_id,
            {
                "bookable_item_id": booking.bookable_item_id,
                "bookable_item_name": name,
                "booking_count": 0,
                "total_revenue": 0.0,
            },
        )
        entry["booking_count"] += 1
        entry["total_revenue"] += _revenue(booking, price)
        day_counts[booking.booking_start_datetime.isoweekday()] += 1
        hour_counts[booking.booking_start_datetime.hour] += 1

    popular = sorted(items.values(), key=lambda e: (-e["booking_count"], -e["total_revenue"]))
    return {
        "popular_items": popular[:limit],
        "peak_booking_days": [
            {"day_of_week": day, "booking_count": n} for day, n in day_counts.most_common()
        ],
        "peak_booking_hours": [
            {"hour": hour, "booking_count": n} for hour, n in hour_counts.most_common()
        ],
    }
