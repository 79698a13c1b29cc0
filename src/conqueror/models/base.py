"""Base model class and common mixins for SQLAlchemy models.

This module provides the declarative base for the tables backing
:class:`conqueror.repository.SqlGameStore`.
"""

from datetime import UTC, datetime
from typing import ClassVar

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides type_annotation_map for automatic type inference from Python types.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
    }


class TimestampCreatedMixin:
    """Mixin for append-only rows that only need a created_at timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


def utc_now() -> datetime:
    """Get current UTC time with timezone awareness."""
    return datetime.now(UTC)
