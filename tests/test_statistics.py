"""Tests for business statistics and insights."""

from datetime import date, datetime

import pytest

from booking_backend.core.errors import NotFoundError
from booking_backend.models import BookableItem
from booking_backend.services.statistics_service import get_business_insights, get_business_statistics

JUNE_1 = date(2025, 6, 1)
JUNE_7 = date(2025, 6, 7)


class TestBusinessStatistics:
    @pytest.mark.asyncio
    async def test_revenue_is_price_times_units(self, session, item, booking_factory):
        await booking_factory(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10), unit_count=2)
        await booking_factory(item, datetime(2025, 6, 1, 13), datetime(2025, 6, 1, 14))
        await booking_factory(item, datetime(2025, 6, 3, 9), datetime(2025, 6, 3, 10))

        stats = await get_business_statistics(session, item.business_id, JUNE_1, JUNE_7)

        assert stats["total_bookings"] == 3
        assert stats["total_revenue"] == 200.0
        assert stats["daily_statistics"] == [
            {"date": "2025-06-01", "total_revenue": 150.0, "total_bookings": 2},
            {"date": "2025-06-03", "total_revenue": 50.0, "total_bookings": 1},
        ]

    @pytest.mark.asyncio
    async def test_bookings_outside_range_ignored(self, session, item, booking_factory):
        await booking_factory(item, datetime(2025, 5, 31, 23), datetime(2025, 6, 1, 0))
        await booking_factory(item, datetime(2025, 6, 8, 0), datetime(2025, 6, 8, 1))
        stats = await get_business_statistics(session, item.business_id, JUNE_1, JUNE_7)
        assert stats["total_bookings"] == 0
        assert stats["daily_statistics"] == []

    @pytest.mark.asyncio
    async def test_item_without_price_counts_zero_revenue(self, session, business, booking_factory):
        free = BookableItem(
            business_id=business.business_id,
            bookable_item_type_code="event",
            bookable_item_name="Open day",
            bookable_item_duration="PT2H",
        )
        session.add(free)
        await session.commit()
        await booking_factory(free, datetime(2025, 6, 2, 10), datetime(2025, 6, 2, 12), unit_count=4)

        stats = await get_business_statistics(session, business.business_id, JUNE_1, JUNE_7)
        assert stats["total_bookings"] == 1
        assert stats["total_revenue"] == 0.0

    @pytest.mark.asyncio
    async def test_unknown_business(self, session):
        with pytest.raises(NotFoundError):
            await get_business_statistics(session, "missing", JUNE_1, JUNE_7)


class TestBusinessInsights:
    @pytest.mark.asyncio
    async def test_popular_items_and_peaks(self, session, business, item, booking_factory):
        room = BookableItem(
            business_id=business.business_id,
            bookable_item_type_code="room",
            bookable_item_name="Sauna room",
            bookable_item_duration="PT1H",
            bookable_item_price=20.0,
        )
        session.add(room)
        await session.commit()

        # Monday 2 June twice at 10:00, Sunday 1 June once at 15:00
        await booking_factory(room, datetime(2025, 6, 2, 10), datetime(2025, 6, 2, 11))
        await booking_factory(room, datetime(2025, 6, 2, 10, 30), datetime(2025, 6, 2, 11))
        await booking_factory(item, datetime(2025, 6, 1, 15), datetime(2025, 6, 1, 16))

        insights = await get_business_insights(session, business.business_id, JUNE_1, JUNE_7)

        popular = insights["popular_items"]
        assert [p["bookable_item_name"] for p in popular] == ["Sauna room", "Massage"]
        assert popular[0]["booking_count"] == 2
        assert popular[0]["total_revenue"] == 40.0
        assert insights["peak_booking_days"][0] == {"day_of_week": 1, "booking_count": 2}
        assert {"day_of_week": 7, "booking_count": 1} in insights["peak_booking_days"]
        assert insights["peak_booking_hours"][0] == {"hour": 10, "booking_count": 2}

    @pytest.mark.asyncio
    async def test_limit(self, session, business, item, booking_factory):
        await booking_factory(item, datetime(2025, 6, 2, 10), datetime(2025, 6, 2, 11))
        insights = await get_business_insights(session, business.business_id, JUNE_1, JUNE_7, limit=1)
        assert len(insights["popular_items"]) == 1


class TestStatisticsEndpoints:
    @pytest.mark.asyncio
    async def test_statistics(self, client, item, booking_factory):
        await booking_factory(item, datetime(2025, 6, 1, 9), datetime(2025, 6, 1, 10), unit_count=3)
        resp = await client.get(
            f"/businesses/{item.business_id}/statistics",
            params={"start_date": "2025-06-01", "end_date": "2025-06-30"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_revenue"] == 150.0
        assert data["daily_statistics"][0]["date"] == "2025-06-01"

    @pytest.mark.asyncio
    async def test_statistics_missing_dates(self, client, item):
        resp = await client.get(f"/businesses/{item.business_id}/statistics", params={"start_date": "2025-06-01"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_statistics_unknown_business(self, client):
        resp = await client.get(
            "/businesses/missing/statistics",
            params={"start_date": "2025-06-01", "end_date": "2025-06-30"},
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_insights(self, client, item, booking_factory):
        await booking_factory(item, datetime(2025, 6, 4, 11), datetime(2025, 6, 4, 12))
        resp = await client.get(
            f"/businesses/{item.business_id}/insights",
            params={"start_date": "2025-06-01", "end_date": "2025-06-30"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["popular_items"][0]["bookable_item_id"] == item.bookable_item_id
        assert data["peak_booking_days"] == [{"day_of_week": 3, "booking_count": 1}]
        assert data["peak_booking_hours"] == [{"hour": 11, "booking_count": 1}]

    @pytest.mark.asyncio
    async def test_insights_bad_date(self, client, item):
        resp = await client.get(
            f"/businesses/{item.business_id}/insights",
            params={"start_date": "June 1", "end_date": "2025-06-30"},
        )
        assert resp.status_code == 400
