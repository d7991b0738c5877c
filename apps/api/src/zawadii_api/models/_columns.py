"""Column helpers shared across model modules."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SqlEnum, func

from zawadii_api.core.clock import utcnow


def enum_column(enum_cls: type[Enum], name: str, **kwargs) -> Column:
    """Persist ``str`` enums by value so rows read the same as API payloads."""

    return Column(
        SqlEnum(enum_cls, name=name, values_callable=lambda enum: [member.value for member in enum]),
        **kwargs,
    )


def created_at_column() -> Column:
    return Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)


def updated_at_column() -> Column:
    return Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False)
