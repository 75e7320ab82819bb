"""Reviews, review reports, facilities, room notices and room pictures.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.add_column(
        "users",
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )

    # Reviews: one per booking
    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lodging_id", sa.Integer(), sa.ForeignKey("lodgings.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False, unique=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("content", sa.String(2000), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("blocked_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
        sa.CheckConstraint("status IN ('active', 'blocked')", name="check_review_status"),
    )
    op.create_index("ix_reviews_id", "reviews", ["id"])
    op.create_index("ix_reviews_lodging_id", "reviews", ["lodging_id"])
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    # Blocked-review listing per lodging
    op.create_index("ix_reviews_lodging_status", "reviews", ["lodging_id", "status"])

    op.create_table(
        "review_reports",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("review_id", sa.Integer(), sa.ForeignKey("reviews.id"), nullable=False),
        sa.Column("business_id", sa.Integer(), sa.ForeignKey("businesses.id"), nullable=False),
        sa.Column("reason", sa.String(500), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("reported_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("review_id", "business_id", name="uq_review_reports_review_business"),
        sa.CheckConstraint(
            "status IN ('pending', 'reviewed', 'rejected')",
            name="check_review_report_status",
        ),
    )
    op.create_index("ix_review_reports_id", "review_reports", ["id"])
    op.create_index("ix_review_reports_review_id", "review_reports", ["review_id"])
    op.create_index("ix_review_reports_business_id", "review_reports", ["business_id"])
    # Admin report queue, filtered by status, newest first
    op.create_index("ix_review_reports_status_reported", "review_reports", ["status", "reported_at"])

    op.create_table(
        "facilities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lodging_id", sa.Integer(), sa.ForeignKey("lodgings.id"), nullable=False),
        sa.Column("service_name", sa.String(50), nullable=False),
        sa.Column("service_detail", sa.String(100), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_facilities_id", "facilities", ["id"])
    op.create_index("ix_facilities_lodging_id", "facilities", ["lodging_id"], unique=True)

    op.create_table(
        "notices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("content", sa.String(100), nullable=False, server_default=""),
        sa.Column("usage_guide", sa.String(100), nullable=False, server_default=""),
        sa.Column("introduction", sa.String(100), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_notices_id", "notices", ["id"])
    op.create_index("ix_notices_room_id", "notices", ["room_id"], unique=True)

    op.create_table(
        "room_pictures",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("picture_name", sa.String(100), nullable=False),
        sa.Column("picture_url", sa.String(200), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_room_pictures_id", "room_pictures", ["id"])
    op.create_index("ix_room_pictures_room_id", "room_pictures", ["room_id"])
    op.create_index("ix_room_pictures_room_created", "room_pictures", ["room_id", "created_at"])


def downgrade() -> None:
    op.drop_table("room_pictures")
    op.drop_table("notices")
    op.drop_table("facilities")
    op.drop_table("review_reports")
    op.drop_table("reviews")
    op.drop_column("users", "is_admin")
