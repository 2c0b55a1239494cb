"""initial schema

Revision ID: 20260101000000
Revises:
Create Date: 2026-01-01 00:00:00
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


revision = "20260101000000"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "sharable_groups",
            postgresql.ARRAY(postgresql.UUID(as_uuid=True)),
            nullable=False,
            server_default=sa.text("'{}'::uuid[]"),
        ),
    ]


def _parent_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=40), nullable=True),
        sa.Column("status_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("statuses.id"), nullable=False),
    ]


def _location_columns() -> list[sa.Column]:
    return [
        sa.Column("location_lon", sa.Float(), nullable=True),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("associated_image_url", sa.String(length=500), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(length=120), nullable=True, unique=True),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("email_address", sa.String(length=255), nullable=True, unique=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("phone_number", sa.String(length=40), nullable=True),
        sa.Column("about_me", sa.Text(), nullable=True),
        sa.Column("online_status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("appearance", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("grid_view", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("role", sa.String(length=40), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "statuses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=60), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255), nullable=True),
    )

    op.create_table(
        "storage_locations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "inventory",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("statuses.id"), nullable=True),
        sa.Column("barcode", sa.String(length=120), nullable=True),
        sa.Column("sku", sa.String(length=120), nullable=True),
        sa.Column("color", sa.String(length=40), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("bought_at", sa.String(length=200), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column(
            "storage_location_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("storage_locations.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_returnable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("return_location", sa.String(length=255), nullable=True),
        sa.Column("return_datetime", sa.DateTime(timezone=True), nullable=True),
        sa.Column("return_notes", sa.Text(), nullable=True),
        sa.Column("max_weight", sa.Integer(), nullable=True),
        sa.Column("min_weight", sa.Integer(), nullable=True),
        sa.Column("max_height", sa.Integer(), nullable=True),
        sa.Column("min_height", sa.Integer(), nullable=True),
        sa.Column("associated_image_url", sa.String(length=500), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint("price >= 0", name="ck_inventory_price_non_negative"),
        sa.CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )
    op.create_index("inventory_created_by_idx", "inventory", ["created_by"])
    op.create_index("inventory_updated_at_idx", "inventory", ["updated_at"])
    op.create_index(
        "inventory_sharable_groups_idx",
        "inventory",
        ["sharable_groups"],
        postgresql_using="gin",
    )

    op.create_table("category", *_parent_columns(), *_location_columns(), *_audit_columns())

    op.create_table(
        "maintenance_plan",
        *_parent_columns(),
        sa.Column("plan_type", sa.String(length=60), nullable=True),
        sa.Column("plan_due", sa.DateTime(timezone=True), nullable=True),
        *_location_columns(),
        *_audit_columns(),
    )

    op.create_table(
        "category_item",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("category.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "item_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("inventory.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_audit_columns(),
    )
    op.create_index("category_item_category_id_idx", "category_item", ["category_id"])
    op.create_index("category_item_item_id_idx", "category_item", ["item_id"])

    op.create_table(
        "maintenance_item",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "maintenance_plan_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("maintenance_plan.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "item_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("inventory.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_audit_columns(),
    )
    op.create_index("maintenance_item_plan_id_idx", "maintenance_item", ["maintenance_plan_id"])
    op.create_index("maintenance_item_item_id_idx", "maintenance_item", ["item_id"])

    op.create_table(
        "favourite_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("category.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "maintenance_plan_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("maintenance_plan.id", ondelete="CASCADE"),
            nullable=True,
        ),
        *_audit_columns(),
        sa.CheckConstraint(
            "category_id IS NOT NULL OR maintenance_plan_id IS NOT NULL",
            name="ck_favourite_items_target",
        ),
    )


def downgrade() -> None:
    op.drop_table("favourite_items")
    op.drop_index("maintenance_item_item_id_idx", table_name="maintenance_item")
    op.drop_index("maintenance_item_plan_id_idx", table_name="maintenance_item")
    op.drop_table("maintenance_item")
    op.drop_index("category_item_item_id_idx", table_name="category_item")
    op.drop_index("category_item_category_id_idx", table_name="category_item")
    op.drop_table("category_item")
    op.drop_table("maintenance_plan")
    op.drop_table("category")
    op.drop_index("inventory_sharable_groups_idx", table_name="inventory")
    op.drop_index("inventory_updated_at_idx", table_name="inventory")
    op.drop_index("inventory_created_by_idx", table_name="inventory")
    op.drop_table("inventory")
    op.drop_table("storage_locations")
    op.drop_table("statuses")
    op.drop_table("profiles")
