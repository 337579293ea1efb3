"""Create car_listings table

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "car_listings",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("catalog_position", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("brand_id", sa.String(), nullable=False),
        sa.Column("brand_name", sa.String(), nullable=False),
        sa.Column("body_type", sa.String(), nullable=True),
        sa.Column("sub_body_type", sa.String(), nullable=True),
        sa.Column("fuel_types", postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column("transmissions", postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column("seating_capacity", sa.Integer(), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("mileage", sa.Float(), nullable=True),
        sa.Column("is_new", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_popular", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("popular_rank", sa.Integer(), nullable=True),
        sa.Column("launch_date", sa.String(), nullable=True),
        sa.Column("key_features", postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price >= 0", name="ck_car_listings_price_non_negative"),
    )
    op.create_index(op.f("ix_car_listings_id"), "car_listings", ["id"], unique=False)
    op.create_index(
        op.f("ix_car_listings_catalog_position"), "car_listings", ["catalog_position"], unique=False
    )
    op.create_index(op.f("ix_car_listings_brand_id"), "car_listings", ["brand_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_car_listings_brand_id"), table_name="car_listings")
    op.drop_index(op.f("ix_car_listings_catalog_position"), table_name="car_listings")
    op.drop_index(op.f("ix_car_listings_id"), table_name="car_listings")
    op.drop_table("car_listings")
