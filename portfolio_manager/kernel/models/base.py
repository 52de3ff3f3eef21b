"""
Base model with common fields and utilities.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    # Fetch server-generated timestamps on flush; lazy refresh is unavailable under asyncio
    __mapper_args__ = {"eager_defaults": True}

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def generate_uuid() -> str:
    """Generate a new user identifier."""
    return str(uuid.uuid4())


def normalize_title(title: Optional[str]) -> str:
    """
    Comparison key for sibling titles.

    Titles compare case-insensitively with surrounding whitespace ignored,
    for every titled entity.
    """
    return (title or "").strip().casefold()
