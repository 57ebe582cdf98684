"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    listing_state = sa.Enum("ACTIVE", "SOLD", name="listing_state")

    # Listing ids are assigned by the ledger, so no sequence backs the key
    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("details", sa.Text(), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(78, 0), nullable=False),
        sa.Column("owner", sa.String(256), nullable=False),
        sa.Column("state", listing_state, nullable=False),
        sa.Column("buyer", sa.String(256), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sold_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_index("ix_listings_owner", "listings", ["owner"])
    op.create_index("ix_listings_state", "listings", ["state"])


def downgrade() -> None:
    op.drop_table("listings")
    sa.Enum(name="listing_state").drop(op.get_bind(), checkfirst=True)
