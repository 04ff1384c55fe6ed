"""Lodging inns and reservations.

Revision ID: 0001_lodging_schema
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_lodging_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "lodging_inns",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("tag", sa.String(length=64)),
        sa.Column("display_name", sa.String(length=320)),
        sa.Column("address", sa.String(length=512)),
        sa.Column("map_url", sa.String(length=1024)),
        *_timestamps(),
    )
    op.create_index(
        "ix_lodging_inns_display_name", "lodging_inns", ["display_name"]
    )

    op.create_table(
        "lodging_reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("inn_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("inn_name", sa.String(length=320)),
        sa.Column("source", sa.String(length=255)),
        sa.Column("external_id", sa.String(length=128), unique=True),
        sa.Column("check_in", sa.Date()),
        sa.Column("check_out", sa.Date()),
        sa.Column("nights", sa.Integer()),
        sa.Column("guest_count", sa.Integer()),
        sa.Column("adults", sa.Integer()),
        sa.Column("children", sa.Integer()),
        sa.Column("infants", sa.Integer()),
        sa.Column("nationality", sa.String(length=64)),
        sa.Column("booking_date", sa.Date()),
        sa.Column("sale_amount", sa.Integer()),
        sa.Column("status", sa.String(length=64)),
        sa.Column("rate_plan", sa.String(length=255)),
        *_timestamps(),
    )
    op.create_index(
        "ix_lodging_reservations_inn_id", "lodging_reservations", ["inn_id"]
    )
    op.create_index(
        "ix_lodging_reservations_inn_check_in",
        "lodging_reservations",
        ["inn_id", "check_in"],
    )


def downgrade() -> None:
    op.drop_index("ix_lodging_reservations_inn_check_in", table_name="lodging_reservations")
    op.drop_index("ix_lodging_reservations_inn_id", table_name="lodging_reservations")
    op.drop_table("lodging_reservations")
    op.drop_index("ix_lodging_inns_display_name", table_name="lodging_inns")
    op.drop_table("lodging_inns")
