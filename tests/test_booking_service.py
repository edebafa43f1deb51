"""Tests for booking creation, cancellation and status transitions."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from booking_backend.core.errors import BadRequestError, NotFoundError
from booking_backend.models import BookableItem, Booking, BookingCreate, BookingStatus, Business
from booking_backend.services import booking_service
from booking_backend.services.booking_service import (
    business_lock,
    cancel_booking,
    complete_booking,
    complete_finished_bookings,
    confirm_booking,
    create_booking,
    get_booking,
    list_bookings_for_business,
)


def _request(item: BookableItem, start: datetime, end: datetime, units: int = 1) -> BookingCreate:
    return BookingCreate(
        business_id=item.business_id,
        bookable_item_id=item.bookable_item_id,
        booking_start_datetime=start,
        booking_end_datetime=end,
        booking_unit_count=units,
    )


async def _booking_count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Booking))
    return result.scalar_one()


class TestCreateBooking:
    @pytest.mark.asyncio
    async def test_creates_pending_booking(self, session, item):
        booking = await create_booking(
            session, _request(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10), units=2)
        )
        assert booking.booking_id
        assert booking.booking_status_code == BookingStatus.PENDING.value
        assert booking.booking_unit_count == 2
        stored = await get_booking(session, booking.booking_id)
        assert stored.bookable_item_id == item.bookable_item_id

    @pytest.mark.asyncio
    async def test_timezone_aware_input_stored_as_naive_utc(self, session, item):
        tz = timezone(timedelta(hours=8))
        booking = await create_booking(
            session,
            _request(item, datetime(2025, 6, 1, 17, tzinfo=tz), datetime(2025, 6, 1, 18, tzinfo=tz)),
        )
        assert booking.booking_start_datetime == datetime(2025, 6, 1, 9)
        assert booking.booking_start_datetime.tzinfo is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("end_hour", [9, 8])
    async def test_end_not_after_start_rejected(self, session, item, end_hour):
        with pytest.raises(BadRequestError, match="later than start"):
            await create_booking(
                session, _request(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, end_hour))
            )
        assert await _booking_count(session) == 0

    @pytest.mark.asyncio
    async def test_unknown_business_rejected_without_side_effects(self, session, item):
        data = _request(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10))
        data.business_id = "00000000-0000-0000-0000-000000000000"
        with pytest.raises(BadRequestError, match="Business does not exist"):
            await create_booking(session, data)
        assert await _booking_count(session) == 0

    @pytest.mark.asyncio
    async def test_unknown_item_rejected_without_side_effects(self, session, item):
        data = _request(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10))
        data.bookable_item_id = "00000000-0000-0000-0000-000000000000"
        with pytest.raises(BadRequestError, match="Bookable item does not exist"):
            await create_booking(session, data)
        assert await _booking_count(session) == 0

    @pytest.mark.asyncio
    async def test_overlapping_booking_rejected(self, session, item):
        await create_booking(session, _request(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10)))
        with pytest.raises(BadRequestError, match="already booked"):
            await create_booking(
                session, _request(item, datetime(2025, 6, 1, 9, 30), datetime(2025, 6, 1, 10, 30))
            )
        assert await _booking_count(session) == 1

    @pytest.mark.asyncio
    async def test_back_to_back_booking_rejected(self, session, item):
        await create_booking(session, _request(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10)))
        with pytest.raises(BadRequestError, match="already booked"):
            await create_booking(session, _request(item, datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11)))

    @pytest.mark.asyncio
    async def test_list_bookings_ordered_and_limited(self, session, item):
        for hour in (15, 9, 12):
            await create_booking(
                session, _request(item, datetime(2025, 6, 1, hour), datetime(2025, 6, 1, hour, 30))
            )
        bookings = await list_bookings_for_business(session, item.business_id, limit=2)
        assert [b.booking_start_datetime.hour for b in bookings] == [9, 12]


class TestConcurrentCreate:
    @pytest.mark.asyncio
    async def test_same_business_lock_is_shared(self):
        lock = business_lock("biz-1")
        assert business_lock("biz-1") is lock
        assert business_lock("biz-2") is not lock

    @pytest.mark.asyncio
    async def test_overlapping_concurrent_creates_book_once(self, tmp_path, monkeypatch):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        async with maker() as s:
            business = Business(business_name="Race Cafe")
            s.add(business)
            await s.flush()
            item = BookableItem(
                business_id=business.business_id,
                bookable_item_name="Table 1",
                bookable_item_type_code="table",
                bookable_item_duration="01:00",
            )
            s.add(item)
            await s.commit()

        real_has_conflict = booking_service.has_conflict

        async def slow_has_conflict(*args, **kwargs):
            found = await real_has_conflict(*args, **kwargs)
            await asyncio.sleep(0.05)
            return found

        monkeypatch.setattr(booking_service, "has_conflict", slow_has_conflict)

        async def attempt(start_minute: int):
            async with maker() as s:
                try:
                    await create_booking(
                        s,
                        _request(
                            item,
                            datetime(2025, 6, 1, 9, start_minute),
                            datetime(2025, 6, 1, 10, start_minute),
                        ),
                    )
                    return "ok"
                except BadRequestError:
                    return "rejected"

        outcomes = await asyncio.gather(attempt(0), attempt(30))
        assert sorted(outcomes) == ["ok", "rejected"]

        async with maker() as s:
            assert await _booking_count(s) == 1
        await engine.dispose()


class TestCancelBooking:
    NOW = datetime(2025, 6, 1, 9, 0)

    @pytest.mark.asyncio
    async def test_cancel_more_than_24_hours_ahead(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 3, 9), datetime(2025, 6, 3, 10))
        cancelled = await cancel_booking(session, b.booking_id, now=self.NOW)
        assert cancelled.booking_status_code == BookingStatus.CANCELLED.value
        assert cancelled.cancellation_reason == "Customer cancelled"
        assert cancelled.updated_at == self.NOW

    @pytest.mark.asyncio
    async def test_cancel_exactly_24_hours_ahead_allowed(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 2, 9), datetime(2025, 6, 2, 10))
        cancelled = await cancel_booking(session, b.booking_id, "Rescheduling", now=self.NOW)
        assert cancelled.cancellation_reason == "Rescheduling"

    @pytest.mark.asyncio
    async def test_cancel_within_24_hours_rejected(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 2, 8, 59), datetime(2025, 6, 2, 10))
        with pytest.raises(BadRequestError, match="24 hours"):
            await cancel_booking(session, b.booking_id, now=self.NOW)
        stored = await get_booking(session, b.booking_id)
        assert stored.booking_status_code == BookingStatus.PENDING.value

    @pytest.mark.asyncio
    async def test_cancel_unknown_booking(self, session):
        with pytest.raises(NotFoundError):
            await cancel_booking(session, "missing", now=self.NOW)

    @pytest.mark.asyncio
    async def test_cancel_twice_rejected(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 5, 9), datetime(2025, 6, 5, 10), status="cancelled")
        with pytest.raises(BadRequestError, match="already cancelled"):
            await cancel_booking(session, b.booking_id, now=self.NOW)

    @pytest.mark.asyncio
    async def test_cancel_completed_rejected(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 5, 9), datetime(2025, 6, 5, 10), status="completed")
        with pytest.raises(BadRequestError, match="already completed"):
            await cancel_booking(session, b.booking_id, now=self.NOW)


class TestTransitions:
    @pytest.mark.asyncio
    async def test_pending_confirmed_completed(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10))
        assert (await confirm_booking(session, b.booking_id)).booking_status_code == "confirmed"
        assert (await complete_booking(session, b.booking_id)).booking_status_code == "completed"

    @pytest.mark.asyncio
    async def test_cannot_complete_pending(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10))
        with pytest.raises(BadRequestError, match="from pending to completed"):
            await complete_booking(session, b.booking_id)

    @pytest.mark.asyncio
    async def test_cannot_confirm_cancelled(self, session, item, booking_factory):
        b = await booking_factory(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10), status="cancelled")
        with pytest.raises(BadRequestError, match="already cancelled"):
            await confirm_booking(session, b.booking_id)

    @pytest.mark.asyncio
    async def test_complete_finished_bookings(self, session, item, booking_factory):
        done = await booking_factory(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10), status="confirmed")
        upcoming = await booking_factory(
            item, datetime(2025, 6, 9, 9), datetime(2025, 6, 9, 10), status="confirmed"
        )
        pending = await booking_factory(item, datetime(2025, 6, 1, 11), datetime(2025, 6, 1, 12))

        n = await complete_finished_bookings(session, now=datetime(2025, 6, 2, 0, 0))
        await session.commit()
        assert n == 1

        statuses = {}
        for b in (done, upcoming, pending):
            await session.refresh(b)
            statuses[b.booking_id] = b.booking_status_code
        assert statuses[done.booking_id] == "completed"
        assert statuses[upcoming.booking_id] == "confirmed"
        assert statuses[pending.booking_id] == "pending"
