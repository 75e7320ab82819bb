"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh in-memory SQLite database (aiosqlite) built from the
ORM metadata. Services roll the session back on failure, which expires every
loaded instance, so fixtures hand out plain ids and headers instead of ORM
objects.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from hotel_business.main import app
from hotel_business.db.base import Base
from hotel_business.db.session import get_db
from hotel_business.core.security import ROLE_BUSINESS, ROLE_USER, create_access_token, hash_password
from hotel_business.models import Business, Lodging, PaymentType, Room, User
from hotel_business.services.callers import BusinessCaller, UserCaller
from hotel_business.services.strategy_factory import set_transition_policy

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "testpassword123"


@dataclass(frozen=True)
class Account:
    id: int
    headers: dict


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables on a private in-memory database and yield a session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_transition_policy():
    set_transition_policy(None)
    yield
    set_transition_policy(None)


async def make_user(db: AsyncSession, email: str, username: str, is_admin: bool = False) -> Account:
    user = User(
        email=email,
        username=username,
        hashed_password=hash_password(PASSWORD),
        is_admin=is_admin,
    )
    db.add(user)
    await db.commit()
    token = create_access_token(data={"sub": str(user.id), "role": ROLE_USER})
    return Account(id=user.id, headers={"Authorization": f"Bearer {token}"})


async def make_business(db: AsyncSession, email: str, name: str) -> Account:
    business = Business(
        email=email,
        business_name=name,
        hashed_password=hash_password(PASSWORD),
        status="approved",
    )
    db.add(business)
    await db.commit()
    token = create_access_token(data={"sub": str(business.id), "role": ROLE_BUSINESS, "ver": 0})
    return Account(id=business.id, headers={"Authorization": f"Bearer {token}"})


async def make_lodging(db: AsyncSession, business_id: int, name: str = "Seaside Hotel") -> int:
    lodging = Lodging(business_id=business_id, name=name, address="1 Beach Rd", region="Busan")
    db.add(lodging)
    await db.commit()
    return lodging.id


async def make_room(db: AsyncSession, lodging_id: int, **overrides) -> int:
    fields = dict(
        name="Ocean Double",
        capacity_min=1,
        capacity_max=4,
        price=Decimal("100.00"),
        inventory_count=1,
        owner_discount=Decimal("10"),
        platform_discount=Decimal("5"),
    )
    fields.update(overrides)
    room = Room(lodging_id=lodging_id, **fields)
    db.add(room)
    await db.commit()
    return room.id


@pytest_asyncio.fixture
async def guest(db_session: AsyncSession) -> Account:
    return await make_user(db_session, "guest@example.com", "guest")


@pytest_asyncio.fixture
async def other_guest(db_session: AsyncSession) -> Account:
    return await make_user(db_session, "other.guest@example.com", "otherguest")


@pytest_asyncio.fixture
async def business(db_session: AsyncSession) -> Account:
    return await make_business(db_session, "owner@example.com", "Seaside Group")


@pytest_asyncio.fixture
async def other_business(db_session: AsyncSession) -> Account:
    return await make_business(db_session, "rival@example.com", "Mountain Group")


@pytest_asyncio.fixture
async def payment_types(db_session: AsyncSession) -> list[int]:
    # Inserted out of order: the default must be chosen by type code
    types = [
        PaymentType(name="bank_transfer", type_code=2),
        PaymentType(name="card", type_code=1),
    ]
    db_session.add_all(types)
    await db_session.commit()
    return [t.id for t in types]


@pytest_asyncio.fixture
async def lodging_id(db_session: AsyncSession, business: Account) -> int:
    return await make_lodging(db_session, business.id)


@pytest_asyncio.fixture
async def room_id(db_session: AsyncSession, lodging_id: int) -> int:
    """Price 100, inventory 1, 1-4 guests, 10% owner and 5% platform discount."""
    return await make_room(db_session, lodging_id)


@pytest.fixture
def business_caller(business: Account) -> BusinessCaller:
    return BusinessCaller(business_id=business.id)


@pytest.fixture
def guest_caller(guest: Account) -> UserCaller:
    return UserCaller(user_id=guest.id)
