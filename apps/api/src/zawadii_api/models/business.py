"""Merchant (tenant) records."""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from sqlalchemy import JSON, Column, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID

from zawadii_api.db.base import Base
from zawadii_api.models._columns import created_at_column, enum_column, updated_at_column


class BusinessStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Business(Base):
    """A merchant running a loyalty program."""

    __tablename__ = "businesses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    owner_user_id = Column(String, nullable=True, index=True)
    name = Column(String(120), nullable=False)
    category = Column(String(80), nullable=True)
    description = Column(Text, nullable=True)
    location_description = Column(String(200), nullable=True)
    address = Column(String, nullable=True)
    phone_number = Column(String(20), nullable=True)
    email = Column(String, nullable=True)
    website = Column(String, nullable=True)
    whatsapp = Column(String, nullable=True)
    instagram = Column(String, nullable=True)
    tiktok = Column(String, nullable=True)
    x_handle = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    cover_image_url = Column(String, nullable=True)
    carousel_images = Column(JSON, nullable=False, default=list)
    operating_hours = Column(JSON, nullable=True)
    tin = Column(String(32), nullable=True)
    status = enum_column(BusinessStatus, "business_status", nullable=False, default=BusinessStatus.ACTIVE)
    # Cashback percentage of each purchase, converted to points.
    points_conversion = Column(Numeric(5, 2), nullable=False, default=2)
    created_at = created_at_column()
    updated_at = updated_at_column()
