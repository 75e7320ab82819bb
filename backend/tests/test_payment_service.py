"""
Tests for stay pricing and payment lookups.
"""

from decimal import Decimal

import pytest

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.models import Room
from hotel_business.services.payment_service import (
    calculate_total,
    get_default_payment_type,
    list_payment_types,
)


def room(price: str, owner: str = "0", platform: str = "0") -> Room:
    return Room(
        name="Test",
        capacity_max=2,
        price=Decimal(price),
        owner_discount=Decimal(owner),
        platform_discount=Decimal(platform),
    )


@pytest.mark.parametrize("price,nights,owner,platform,expected", [
    ("100.00", 2, "10", "5", "170.00"),
    ("100.00", 1, "0", "0", "100.00"),
    ("100.00", 3, "50", "50", "0.00"),
    ("100.00", 1, "70", "60", "0.00"),
    ("99.99", 1, "33.33", "0", "66.66"),
    ("0.00", 5, "10", "10", "0.00"),
])
def test_calculate_total(price, nights, owner, platform, expected):
    assert calculate_total(room(price, owner, platform), nights) == Decimal(expected)


def test_discounts_do_not_compound():
    # 10% then 10% of the remainder would give 81; both come off the base
    assert calculate_total(room("100.00", "10", "10"), 1) == Decimal("80.00")


@pytest.mark.asyncio
async def test_default_payment_type_uses_lowest_code(db_session, payment_types):
    default = await get_default_payment_type(db_session)
    assert default.type_code == 1
    assert default.name == "card"

    types = await list_payment_types(db_session)
    assert [t.type_code for t in types] == [1, 2]


@pytest.mark.asyncio
async def test_default_payment_type_missing(db_session):
    with pytest.raises(ServiceError) as exc:
        await get_default_payment_type(db_session)
    assert exc.value.code == ErrorCode.PAYMENT_TYPE_NOT_FOUND
