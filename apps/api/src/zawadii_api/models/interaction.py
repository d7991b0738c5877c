"""Purchase activity and per-business point balances."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from zawadii_api.core.clock import utcnow
from zawadii_api.db.base import Base
from zawadii_api.models._columns import created_at_column

DASHBOARD_ENTRY = "dashboard_entry"


class CustomerInteraction(Base):
    """A purchase or visit recorded for a business, by app customer or walk-in phone."""

    __tablename__ = "customer_business_interactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    interaction_type = Column(String(40), nullable=False, default=DASHBOARD_ENTRY)
    amount_spent = Column(Numeric(14, 2), nullable=False, default=0)
    points_awarded = Column(Integer, nullable=False, default=0)
    phone_number = Column(String(20), nullable=True, index=True)
    name = Column(String, nullable=True)
    optional_note = Column(Text, nullable=True)
    created_at = created_at_column()


class CustomerPoints(Base):
    """Running points and spend totals for one phone number at one business."""

    __tablename__ = "customer_points"
    __table_args__ = (
        UniqueConstraint("business_id", "phone_number", name="uq_customer_points_business_phone"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    phone_number = Column(String(20), nullable=False)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    points = Column(Integer, nullable=False, default=0)
    total_amount_spent = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = created_at_column()
    last_updated = Column(DateTime(timezone=True), nullable=False, default=utcnow)
