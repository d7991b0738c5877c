"""Reward catalog, generated voucher codes and customer reward history."""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from zawadii_api.db.base import Base
from zawadii_api.models._columns import created_at_column, enum_column, updated_at_column


class RewardCodeStatus(str, Enum):
    """Lifecycle of a voucher code."""

    UNUSED = "unused"
    PENDING = "pending"
    BOUGHT = "bought"
    REDEEMED = "redeemed"


class CustomerRewardStatus(str, Enum):
    PENDING = "pending"
    CLAIMED = "claimed"
    BOUGHT = "bought"
    REDEEMED = "redeemed"
    EXPIRED = "expired"


class Reward(Base):
    """Catalog entry a customer can obtain with points."""

    __tablename__ = "rewards"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    points_required = Column(Integer, nullable=False)
    # What the reward costs the business, used for budget and spend reporting.
    cost = Column(Numeric(14, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    image_url = Column(String, nullable=True)
    terms_and_conditions = Column(Text, nullable=True)
    uses_default_terms = Column(Boolean, nullable=False, default=True)
    expiry_date = Column(DateTime(timezone=True), nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()


class RewardCode(Base):
    """Voucher string that entitles its holder to a reward."""

    __tablename__ = "reward_codes"
    __table_args__ = (
        UniqueConstraint("business_id", "code", name="uq_reward_codes_business_code"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    reward_id = Column(UUID(as_uuid=True), ForeignKey("rewards.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(32), nullable=False)
    status = enum_column(RewardCodeStatus, "reward_code_status", nullable=False, default=RewardCodeStatus.UNUSED)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    bought_at = Column(DateTime(timezone=True), nullable=True)
    redeemed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = created_at_column()

    reward = relationship("Reward", lazy="raise")
    customer = relationship("Customer", lazy="raise")


class CustomerReward(Base):
    """A reward claimed by (or sent to) a customer."""

    __tablename__ = "customer_rewards"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    reward_id = Column(UUID(as_uuid=True), ForeignKey("rewards.id", ondelete="CASCADE"), nullable=False)
    reward_code_id = Column(UUID(as_uuid=True), ForeignKey("reward_codes.id", ondelete="SET NULL"), nullable=True)
    points_spent = Column(Integer, nullable=False, default=0)
    status = enum_column(
        CustomerRewardStatus, "customer_reward_status", nullable=False, default=CustomerRewardStatus.PENDING
    )
    note = Column(Text, nullable=True)
    claimed_at = Column(DateTime(timezone=True), nullable=True)
    redeemed_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = created_at_column()

    reward = relationship("Reward", lazy="raise")
    customer = relationship("Customer", lazy="raise")
