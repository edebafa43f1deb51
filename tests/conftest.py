"""Shared test fixtures and helpers."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault("BOOKING_COMPLETION_ENABLED", "false")

from datetime import datetime, time  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import booking_backend.models  # noqa: E402,F401
from booking_backend.core.db import get_session  # noqa: E402
from booking_backend.main import app  # noqa: E402
from booking_backend.models import (  # noqa: E402
    BookableItem,
    Booking,
    Business,
    BusinessHours,
    StaffMember,
)

API_KEY = "test-api-key"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    async def _get_session():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://test", headers={"X-API-Key": API_KEY}
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def business(session) -> Business:
    b = Business(business_name="Harbour Spa", business_timezone="Asia/Taipei")
    session.add(b)
    await session.commit()
    return b


@pytest_asyncio.fixture
async def item(session, business) -> BookableItem:
    i = BookableItem(
        business_id=business.business_id,
        bookable_item_type_code="service",
        bookable_item_name="Massage",
        bookable_item_duration="01:00:00",
        bookable_item_price=50.0,
    )
    session.add(i)
    await session.commit()
    return i


@pytest_asyncio.fixture
async def staff_member(session, business) -> StaffMember:
    s = StaffMember(business_id=business.business_id, staff_member_name="Mei Lin")
    session.add(s)
    await session.commit()
    return s


async def add_booking(
    session: AsyncSession,
    item: BookableItem,
    start: datetime,
    end: datetime,
    status: str = "pending",
    unit_count: int = 1,
) -> Booking:
    """Insert a booking directly, bypassing the conflict check."""
    b = Booking(
        business_id=item.business_id,
        bookable_item_id=item.bookable_item_id,
        booking_start_datetime=start,
        booking_end_datetime=end,
        booking_status_code=status,
        booking_unit_count=unit_count,
    )
    session.add(b)
    await session.commit()
    return b


async def add_business_hours(
    session: AsyncSession, business: Business, day_of_week: int, opens: time, closes: time
) -> BusinessHours:
    h = BusinessHours(
        business_id=business.business_id,
        day_of_week=day_of_week,
        start_time=opens,
        end_time=closes,
    )
    session.add(h)
    await session.commit()
    return h


@pytest.fixture
def booking_factory(session):
    async def _make(item, start, end, **kwargs):
        return await add_booking(session, item, start, end, **kwargs)

    return _make


@pytest.fixture
def hours_factory(session):
    async def _make(business, day_of_week, opens, closes):
        return await add_business_hours(session, business, day_of_week, opens, closes)

    return _make
