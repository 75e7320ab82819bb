"""
Tests that need a real PostgreSQL server.

SQLite serializes writers on its own and keeps a transaction usable after a
failed statement, so both the booking race and aborted-transaction handling
only show up on a real server. Set TEST_POSTGRES_URL (postgresql+asyncpg://...)
to a scratch database to run these; its tables are dropped and recreated.
`docker compose -f docker-compose.test.yml up -d` starts one on port 55432,
and CI runs this module against a Postgres service.
"""

import asyncio
import os
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import select, func, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.db.base import Base
from hotel_business.models import Booking, Business, Lodging, Room, User
from hotel_business.schemas.booking import BookingCreate
from hotel_business.services.booking_service import create_booking
from hotel_business.services import booking_query
from hotel_business.services.booking_query import BookingFilters, list_bookings
from hotel_business.services.callers import BusinessCaller, UserCaller

POSTGRES_URL = os.environ.get("TEST_POSTGRES_URL")

pytestmark = pytest.mark.skipif(not POSTGRES_URL, reason="TEST_POSTGRES_URL not set")


@pytest_asyncio.fixture
async def pg_sessions():
    engine = create_async_engine(POSTGRES_URL, pool_size=20)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()


async def seed(factory, inventory: int, guests: int) -> tuple[int, list[int]]:
    async with factory() as db:
        business = Business(email="race@example.com", business_name="Race Inn", hashed_password="x")
        db.add(business)
        await db.flush()
        lodging = Lodging(business_id=business.id, name="Race Inn", address="1 Fast Ln", region="Seoul")
        db.add(lodging)
        await db.flush()
        room = Room(
            lodging_id=lodging.id,
            name="Last Room",
            capacity_max=2,
            price=Decimal("50.00"),
            inventory_count=inventory,
        )
        users = [
            User(email=f"racer{i}@example.com", username=f"racer{i}", hashed_password="x")
            for i in range(guests)
        ]
        db.add(room)
        db.add_all(users)
        await db.commit()
        return room.id, [u.id for u in users]


async def attempt(factory, room_id: int, user_id: int) -> bool:
    async with factory() as db:
        data = BookingCreate(
            room_id=room_id,
            adult=1,
            checkin_date=date(2027, 12, 24),
            checkout_date=date(2027, 12, 26),
        )
        try:
            await create_booking(db, data, UserCaller(user_id=user_id))
        except ServiceError as e:
            assert e.code == ErrorCode.ROOM_NOT_AVAILABLE
            return False
        return True


@pytest.mark.asyncio
@pytest.mark.parametrize("inventory,guests", [(1, 10), (3, 10)])
async def test_parallel_requests_never_overbook(pg_sessions, inventory, guests):
    room_id, user_ids = await seed(pg_sessions, inventory, guests)

    results = await asyncio.gather(*(attempt(pg_sessions, room_id, uid) for uid in user_ids))

    async with pg_sessions() as db:
        stored = (
            await db.execute(select(func.count()).select_from(Booking).where(Booking.room_id == room_id))
        ).scalar()

    assert stored == inventory
    assert sum(results) == inventory


@pytest.mark.asyncio
async def test_failed_join_does_not_abort_the_listing(pg_sessions, monkeypatch):
    room_id, user_ids = await seed(pg_sessions, inventory=2, guests=2)
    for user_id in user_ids:
        assert await attempt(pg_sessions, room_id, user_id)

    load_user = booking_query._load_user
    failed = []

    async def broken_once(db, user_id):
        if not failed:
            failed.append(user_id)
            # Postgres refuses every later statement of an aborted transaction
            await db.execute(text("SELECT no_such_column FROM users"))
        return await load_user(db, user_id)

    monkeypatch.setattr(booking_query, "_load_user", broken_once)

    async with pg_sessions() as db:
        business_id = (await db.execute(select(Booking.business_id).limit(1))).scalar_one()
        listing = await list_bookings(db, BusinessCaller(business_id=business_id), BookingFilters())

    first, second = listing.items
    assert first.user is None
    assert first.room.id == room_id
    assert first.lodging is not None
    assert second.user.id in user_ids
    assert second.lodging is not None
