"""
Room model: a bookable unit type with finite inventory.

Key design decisions:
- inventory_count is the number of physical units sharing this definition;
  availability is derived from overlapping bookings, never stored
- `version` is bumped by every booking creation on the room. The conditional
  UPDATE on it is what serializes concurrent creators (see booking_service)
- Discounts are percentages of the base price, applied independently
"""

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Index, CheckConstraint

from hotel_business.db.base import Base, TimestampMixin


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    lodging_id = Column(Integer, ForeignKey("lodgings.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    room_type = Column(String(20), nullable=False, default="standard")
    room_size = Column(String(50), nullable=False, default="")
    capacity_min = Column(Integer, nullable=False, default=1)
    capacity_max = Column(Integer, nullable=False)
    check_in_time = Column(String(5), nullable=False, default="15:00")
    check_out_time = Column(String(5), nullable=False, default="11:00")
    description = Column(String(2000), nullable=False, default="")
    price = Column(Numeric(12, 2), nullable=False)
    inventory_count = Column(Integer, nullable=False, default=1)
    owner_discount = Column(Numeric(5, 2), nullable=False, default=0)
    platform_discount = Column(Numeric(5, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="active", index=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("capacity_min >= 1", name="check_room_capacity_min_positive"),
        CheckConstraint("capacity_min <= capacity_max", name="check_room_capacity_range"),
        CheckConstraint("price >= 0", name="check_room_price_non_negative"),
        CheckConstraint("inventory_count >= 1", name="check_room_inventory_positive"),
        CheckConstraint("owner_discount >= 0 AND owner_discount <= 100", name="check_room_owner_discount"),
        CheckConstraint(
            "platform_discount >= 0 AND platform_discount <= 100", name="check_room_platform_discount"
        ),
        CheckConstraint("status IN ('active', 'inactive', 'maintenance')", name="check_room_status"),
        Index("ix_rooms_lodging_created", "lodging_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, lodging={self.lodging_id}, inventory={self.inventory_count})>"
