"""Initial schema: accounts, lodgings, rooms, bookings, payments.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Guests
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(30), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Businesses
    op.create_table(
        "businesses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("owner_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("phone", sa.String(30), nullable=False, server_default=""),
        sa.Column("business_number", sa.String(30), nullable=True, unique=True),
        sa.Column("business_type", sa.String(20), nullable=False, server_default="hotel"),
        sa.Column("address", sa.String(255), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_login_attempt", sa.DateTime(timezone=True), nullable=True),
        sa.Column("token_version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.CheckConstraint(
            "business_type IN ('hotel', 'motel', 'guesthouse', 'resort', 'etc')",
            name="check_business_type",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'suspended')",
            name="check_business_status",
        ),
    )
    op.create_index("ix_businesses_id", "businesses", ["id"])
    op.create_index("ix_businesses_email", "businesses", ["email"], unique=True)
    op.create_index("ix_businesses_status", "businesses", ["status"])

    # Lodgings
    op.create_table(
        "lodgings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("business_id", sa.Integer(), sa.ForeignKey("businesses.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("region", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(30), nullable=False, server_default=""),
        sa.Column("description", sa.String(2000), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_lodgings_id", "lodgings", ["id"])
    op.create_index("ix_lodgings_business_id", "lodgings", ["business_id"])

    # Rooms
    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lodging_id", sa.Integer(), sa.ForeignKey("lodgings.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("room_type", sa.String(20), nullable=False, server_default="standard"),
        sa.Column("room_size", sa.String(50), nullable=False, server_default=""),
        sa.Column("capacity_min", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("capacity_max", sa.Integer(), nullable=False),
        sa.Column("check_in_time", sa.String(5), nullable=False, server_default="15:00"),
        sa.Column("check_out_time", sa.String(5), nullable=False, server_default="11:00"),
        sa.Column("description", sa.String(2000), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("inventory_count", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("owner_discount", sa.Numeric(5, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("platform_discount", sa.Numeric(5, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.CheckConstraint("capacity_min >= 1", name="check_room_capacity_min_positive"),
        sa.CheckConstraint("capacity_min <= capacity_max", name="check_room_capacity_range"),
        sa.CheckConstraint("price >= 0", name="check_room_price_non_negative"),
        sa.CheckConstraint("inventory_count >= 1", name="check_room_inventory_positive"),
        sa.CheckConstraint("owner_discount >= 0 AND owner_discount <= 100", name="check_room_owner_discount"),
        sa.CheckConstraint(
            "platform_discount >= 0 AND platform_discount <= 100", name="check_room_platform_discount"
        ),
        sa.CheckConstraint("status IN ('active', 'inactive', 'maintenance')", name="check_room_status"),
    )
    op.create_index("ix_rooms_id", "rooms", ["id"])
    op.create_index("ix_rooms_lodging_id", "rooms", ["lodging_id"])
    op.create_index("ix_rooms_status", "rooms", ["status"])
    op.create_index("ix_rooms_lodging_created", "rooms", ["lodging_id", "created_at"])

    # Bookings
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("business_id", sa.Integer(), sa.ForeignKey("businesses.id"), nullable=False),
        sa.Column("adult", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("child", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("checkin_date", sa.Date(), nullable=False),
        sa.Column("checkout_date", sa.Date(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("booking_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("cancellation_reason", sa.String(500), nullable=True),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
        sa.CheckConstraint("checkin_date < checkout_date", name="check_booking_date_order"),
        sa.CheckConstraint("duration > 0", name="check_booking_duration_positive"),
        sa.CheckConstraint("adult >= 0 AND child >= 0", name="check_booking_guests_non_negative"),
        sa.CheckConstraint(
            "booking_status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'paid', 'refunded', 'failed')",
            name="check_booking_payment_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_room_id", "bookings", ["room_id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_business_id", "bookings", ["business_id"])
    # Backs the overlap count run inside every booking transaction:
    # WHERE room_id = ? AND checkin_date < ? AND checkout_date > ?
    op.create_index("ix_bookings_room_dates", "bookings", ["room_id", "checkin_date", "checkout_date"])
    # Business booking list, newest first
    op.create_index("ix_bookings_business_booked", "bookings", ["business_id", "booking_date"])

    # Payment types
    payment_types = op.create_table(
        "payment_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(20), nullable=False),
        sa.Column("type_code", sa.Integer(), nullable=False, unique=True),
    )
    op.create_index("ix_payment_types_id", "payment_types", ["id"])
    op.bulk_insert(
        payment_types,
        [
            {"name": "card", "type_code": 1},
            {"name": "bank_transfer", "type_code": 2},
            {"name": "on_site", "type_code": 3},
        ],
    )

    # Payments
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("payment_type_id", sa.Integer(), sa.ForeignKey("payment_types.id"), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.CheckConstraint("total >= 0", name="check_payment_total_non_negative"),
        sa.CheckConstraint("paid >= 0", name="check_payment_paid_non_negative"),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_booking_id", "payments", ["booking_id"], unique=True)


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("payment_types")
    op.drop_table("bookings")
    op.drop_table("rooms")
    op.drop_table("lodgings")
    op.drop_table("businesses")
    op.drop_table("users")
