"""Loyalty core tables.

Revision ID: 20261018_01
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "20261018_01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


business_status = sa.Enum("active", "inactive", "pending", name="business_status")
reward_code_status = sa.Enum("unused", "pending", "bought", "redeemed", name="reward_code_status")
customer_reward_status = sa.Enum(
    "pending", "claimed", "bought", "redeemed", "expired", name="customer_reward_status"
)
promotion_status = sa.Enum("active", "inactive", "expired", name="promotion_status")


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=True)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "businesses",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("owner_user_id", sa.String(), nullable=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("category", sa.String(80), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location_description", sa.String(200), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("whatsapp", sa.String(), nullable=True),
        sa.Column("instagram", sa.String(), nullable=True),
        sa.Column("tiktok", sa.String(), nullable=True),
        sa.Column("x_handle", sa.String(), nullable=True),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("cover_image_url", sa.String(), nullable=True),
        sa.Column("carousel_images", sa.JSON(), nullable=False),
        sa.Column("operating_hours", sa.JSON(), nullable=True),
        sa.Column("tin", sa.String(32), nullable=True),
        sa.Column("status", business_status, nullable=False, server_default="active"),
        sa.Column("points_conversion", sa.Numeric(5, 2), nullable=False, server_default="2"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_businesses_owner_user_id", "businesses", ["owner_user_id"])

    op.create_table(
        "customers",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("nickname", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_customers_phone_number", "customers", ["phone_number"], unique=True)

    op.create_table(
        "customer_business_interactions",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("business_id", _uuid(), sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("customer_id", _uuid(), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("interaction_type", sa.String(40), nullable=False, server_default="dashboard_entry"),
        sa.Column("amount_spent", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("points_awarded", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("optional_note", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index(
        "ix_customer_business_interactions_business_id", "customer_business_interactions", ["business_id"]
    )
    op.create_index(
        "ix_customer_business_interactions_customer_id", "customer_business_interactions", ["customer_id"]
    )
    op.create_index(
        "ix_customer_business_interactions_phone_number", "customer_business_interactions", ["phone_number"]
    )

    op.create_table(
        "customer_points",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("business_id", _uuid(), sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("customer_id", _uuid(), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_amount_spent", sa.Numeric(14, 2), nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("last_updated"),
        sa.UniqueConstraint("business_id", "phone_number", name="uq_customer_points_business_phone"),
    )
    op.create_index("ix_customer_points_business_id", "customer_points", ["business_id"])

    op.create_table(
        "rewards",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("business_id", _uuid(), sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("points_required", sa.Integer(), nullable=False),
        sa.Column("cost", sa.Numeric(14, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("terms_and_conditions", sa.Text(), nullable=True),
        sa.Column("uses_default_terms", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expiry_date", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_rewards_business_id", "rewards", ["business_id"])

    op.create_table(
        "reward_codes",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("business_id", _uuid(), sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reward_id", _uuid(), sa.ForeignKey("rewards.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code", sa.String(32), nullable=False),
        sa.Column("status", reward_code_status, nullable=False, server_default="unused"),
        sa.Column("customer_id", _uuid(), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("bought_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        sa.UniqueConstraint("business_id", "code", name="uq_reward_codes_business_code"),
    )
    op.create_index("ix_reward_codes_business_id", "reward_codes", ["business_id"])
    op.create_index("ix_reward_codes_reward_id", "reward_codes", ["reward_id"])

    op.create_table(
        "customer_rewards",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("business_id", _uuid(), sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("customer_id", _uuid(), sa.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reward_id", _uuid(), sa.ForeignKey("rewards.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "reward_code_id", _uuid(), sa.ForeignKey("reward_codes.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("points_spent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", customer_reward_status, nullable=False, server_default="pending"),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_customer_rewards_business_id", "customer_rewards", ["business_id"])
    op.create_index("ix_customer_rewards_customer_id", "customer_rewards", ["customer_id"])

    op.create_table(
        "promotions",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("business_id", _uuid(), sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.String(200), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", promotion_status, nullable=False, server_default="active"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_promotions_business_id", "promotions", ["business_id"])

    op.create_table(
        "loyalty_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("money_points_ratio", sa.Numeric(12, 4), nullable=False),
        _timestamp("updated_at"),
    )
    op.execute("INSERT INTO loyalty_settings (id, money_points_ratio) VALUES (1, 100)")


def downgrade() -> None:
    op.drop_table("loyalty_settings")
    op.drop_index("ix_promotions_business_id", table_name="promotions")
    op.drop_table("promotions")
    op.drop_index("ix_customer_rewards_customer_id", table_name="customer_rewards")
    op.drop_index("ix_customer_rewards_business_id", table_name="customer_rewards")
    op.drop_table("customer_rewards")
    op.drop_index("ix_reward_codes_reward_id", table_name="reward_codes")
    op.drop_index("ix_reward_codes_business_id", table_name="reward_codes")
    op.drop_table("reward_codes")
    op.drop_index("ix_rewards_business_id", table_name="rewards")
    op.drop_table("rewards")
    op.drop_index("ix_customer_points_business_id", table_name="customer_points")
    op.drop_table("customer_points")
    op.drop_index("ix_customer_business_interactions_phone_number", table_name="customer_business_interactions")
    op.drop_index("ix_customer_business_interactions_customer_id", table_name="customer_business_interactions")
    op.drop_index("ix_customer_business_interactions_business_id", table_name="customer_business_interactions")
    op.drop_table("customer_business_interactions")
    op.drop_index("ix_customers_phone_number", table_name="customers")
    op.drop_table("customers")
    op.drop_index("ix_businesses_owner_user_id", table_name="businesses")
    op.drop_table("businesses")

    bind = op.get_bind()
    for enum in (promotion_status, customer_reward_status, reward_code_status, business_status):
        enum.drop(bind, checkfirst=True)
