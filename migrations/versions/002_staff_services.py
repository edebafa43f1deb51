"""Staff services and booking staff assignment.

Revision ID: 002_staff_services
Revises: 001_initial
Create Date: 2025-06-20

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_staff_services"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "staff_services",
        sa.Column("staff_member_id", sa.String(), nullable=False),
        sa.Column("bookable_item_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["staff_member_id"], ["staff_members.staff_member_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["bookable_item_id"], ["bookable_items.bookable_item_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("staff_member_id", "bookable_item_id"),
    )
    op.create_index(op.f("ix_staff_services_bookable_item_id"), "staff_services", ["bookable_item_id"], unique=False)

    with op.batch_alter_table("bookings") as batch:
        batch.add_column(sa.Column("staff_member_id", sa.String(), nullable=True))
        batch.create_foreign_key(
            "fk_bookings_staff_member_id",
            "staff_members",
            ["staff_member_id"],
            ["staff_member_id"],
            ondelete="SET NULL",
        )
        batch.create_index("ix_bookings_staff_member_id", ["staff_member_id"], unique=False)


def downgrade() -> None:
    with op.batch_alter_table("bookings") as batch:
        batch.drop_index("ix_bookings_staff_member_id")
        batch.drop_constraint("fk_bookings_staff_member_id", type_="foreignkey")
        batch.drop_column("staff_member_id")
    op.drop_index(op.f("ix_staff_services_bookable_item_id"), table_name="staff_services")
    op.drop_table("staff_services")
