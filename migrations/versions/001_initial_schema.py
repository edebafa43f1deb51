"""Initial schema: businesses, business_hours, bookable_items, bookings, staff.

Revision ID: 001_initial
Revises:
Create Date: 2025-05-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "businesses",
        sa.Column("business_id", sa.String(), nullable=False),
        sa.Column("business_name", sa.String(), nullable=False),
        sa.Column("business_timezone", sa.String(), nullable=False, server_default="UTC"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("business_id"),
    )

    op.create_table(
        "business_hours",
        sa.Column("business_hours_id", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.business_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("business_hours_id"),
        sa.UniqueConstraint("business_id", "day_of_week", name="uq_business_hours_day"),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_business_hours_day_of_week"),
        sa.CheckConstraint("end_time > start_time", name="ck_business_hours_window"),
    )
    op.create_index(op.f("ix_business_hours_business_id"), "business_hours", ["business_id"], unique=False)

    op.create_table(
        "bookable_items",
        sa.Column("bookable_item_id", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=False),
        sa.Column("bookable_item_type_code", sa.String(), nullable=False, server_default="service"),
        sa.Column("bookable_item_name", sa.String(), nullable=False),
        sa.Column("bookable_item_description", sa.String(), nullable=True),
        sa.Column("bookable_item_duration", sa.String(), nullable=False),
        sa.Column("bookable_item_price", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.business_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("bookable_item_id"),
        sa.CheckConstraint(
            "bookable_item_type_code IN ('service', 'resource', 'event', 'teaching', 'table', 'room')",
            name="ck_bookable_items_type_code",
        ),
    )
    op.create_index(op.f("ix_bookable_items_business_id"), "bookable_items", ["business_id"], unique=False)

    op.create_table(
        "bookings",
        sa.Column("booking_id", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=False),
        sa.Column("bookable_item_id", sa.String(), nullable=False),
        sa.Column("booking_start_datetime", sa.DateTime(), nullable=False),
        sa.Column("booking_end_datetime", sa.DateTime(), nullable=False),
        sa.Column("booking_status_code", sa.String(), nullable=False, server_default="pending"),
        sa.Column("booking_unit_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("cancellation_reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.business_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["bookable_item_id"], ["bookable_items.bookable_item_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("booking_id"),
        sa.CheckConstraint("booking_end_datetime > booking_start_datetime", name="ck_bookings_interval"),
        sa.CheckConstraint("booking_unit_count >= 1", name="ck_bookings_unit_count"),
    )
    op.create_index(op.f("ix_bookings_business_id"), "bookings", ["business_id"], unique=False)
    op.create_index(op.f("ix_bookings_bookable_item_id"), "bookings", ["bookable_item_id"], unique=False)
    op.create_index(op.f("ix_bookings_booking_start_datetime"), "bookings", ["booking_start_datetime"], unique=False)
    op.create_index(op.f("ix_bookings_booking_status_code"), "bookings", ["booking_status_code"], unique=False)

    op.create_table(
        "staff_members",
        sa.Column("staff_member_id", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=False),
        sa.Column("staff_member_name", sa.String(), nullable=False),
        sa.Column("staff_member_is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.business_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("staff_member_id"),
    )
    op.create_index(op.f("ix_staff_members_business_id"), "staff_members", ["business_id"], unique=False)

    op.create_table(
        "staff_availability",
        sa.Column("staff_availability_id", sa.String(), nullable=False),
        sa.Column("staff_member_id", sa.String(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["staff_member_id"], ["staff_members.staff_member_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("staff_availability_id"),
    )
    op.create_index(
        op.f("ix_staff_availability_staff_member_id"), "staff_availability", ["staff_member_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_staff_availability_staff_member_id"), table_name="staff_availability")
    op.drop_table("staff_availability")
    op.drop_index(op.f("ix_staff_members_business_id"), table_name="staff_members")
    op.drop_table("staff_members")
    op.drop_index(op.f("ix_bookings_booking_status_code"), table_name="bookings")
    op.drop_index(op.f("ix_bookings_booking_start_datetime"), table_name="bookings")
    op.drop_index(op.f("ix_bookings_bookable_item_id"), table_name="bookings")
    op.drop_index(op.f("ix_bookings_business_id"), table_name="bookings")
    op.drop_table("bookings")
    op.drop_index(op.f("ix_bookable_items_business_id"), table_name="bookable_items")
    op.drop_table("bookable_items")
    op.drop_index(op.f("ix_business_hours_business_id"), table_name="business_hours")
    op.drop_table("business_hours")
    op.drop_table("businesses")
