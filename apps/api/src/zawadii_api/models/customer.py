"""App-registered loyalty customers."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, String
from sqlalchemy.dialects.postgresql import UUID

from zawadii_api.db.base import Base
from zawadii_api.models._columns import created_at_column


class Customer(Base):
    """A customer who signed up through the mobile app."""

    __tablename__ = "customers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    full_name = Column(String, nullable=True)
    nickname = Column(String, nullable=True)
    phone_number = Column(String(20), nullable=True, unique=True, index=True)
    email = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    created_at = created_at_column()

    @property
    def display_name(self) -> str:
        return self.full_name or self.nickname or "Unknown"
