"""create_resources_and_reservations

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Step 1: btree_gist lets the exclusion constraint mix "=" on scalars with "&&" on ranges
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # Step 2: Resources
    op.create_table(
        "resources",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("price_per_hour", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_per_day", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_per_week", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_per_month", sa.Numeric(10, 2), nullable=False),
        sa.Column("available", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("opening_hours", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_resources"),
    )
    op.create_index("ix_resources_available", "resources", ["available"])

    # Step 3: Reservations
    op.create_table(
        "reservations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("resource_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("start_minute", sa.Integer(), nullable=False),
        sa.Column("end_minute", sa.Integer(), nullable=False),
        sa.Column("duration_value", sa.Numeric(6, 2), nullable=False),
        sa.Column("duration_type", sa.String(length=10), nullable=False),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("payment_method", sa.String(length=10), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_reservations"),
        sa.ForeignKeyConstraint(
            ["resource_id"], ["resources.id"],
            name="fk_reservations_resource_id_resources", ondelete="CASCADE",
        ),
        sa.CheckConstraint("start_minute < end_minute", name="ck_reservations_start_before_end"),
        sa.CheckConstraint("guest_count >= 1", name="ck_reservations_positive_guest_count"),
    )
    op.create_index("ix_reservations_resource_id", "reservations", ["resource_id"])
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"])
    op.create_index("ix_reservations_status", "reservations", ["status"])
    op.create_index(
        "ix_reservations_slot_lookup", "reservations",
        ["resource_id", "date", "start_time", "end_time"],
    )
    op.create_index(
        "ix_reservations_availability", "reservations",
        ["resource_id", "date", "status"],
    )

    # Step 4: No two active reservations of a resource may overlap on the same date
    op.create_exclude_constraint(
        "ex_reservations_no_overlap",
        "reservations",
        ("resource_id", "="),
        ("date", "="),
        (sa.text("int4range(start_minute, end_minute)"), "&&"),
        using="gist",
        where=sa.text("status IN ('pending', 'confirmed')"),
    )


def downgrade() -> None:
    op.drop_constraint("ex_reservations_no_overlap", "reservations")
    op.drop_index("ix_reservations_availability", table_name="reservations")
    op.drop_index("ix_reservations_slot_lookup", table_name="reservations")
    op.drop_index("ix_reservations_status", table_name="reservations")
    op.drop_index("ix_reservations_user_id", table_name="reservations")
    op.drop_index("ix_reservations_resource_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_resources_available", table_name="resources")
    op.drop_table("resources")
