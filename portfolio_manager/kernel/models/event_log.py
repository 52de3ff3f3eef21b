"""
Immutable event log for the audit trail.

Mutations are logged here in the same unit of work as the write, so an
event exists iff the change it describes was committed. Access decisions
are logged here as well.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String, func, Index, JSON
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_manager.kernel.models.base import Base


class EventType(str, Enum):
    """All event types for the audit log."""
    
    ENTITY_CREATED = "entity.created"
    ENTITY_UPDATED = "entity.updated"
    ENTITY_DELETED = "entity.deleted"
    ACCESS_GRANTED = "access.granted"
    ACCESS_DENIED = "access.denied"


class EventLog(Base):
    """
    Immutable audit event log.
    
    This table is append-only - no updates or deletes allowed.
    """
    
    __tablename__ = "event_logs"
    
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    
    # Event identification
    event_type: Mapped[EventType] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    
    # Entity reference (resource IDs are ints, user IDs are strings)
    entity_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    entity_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    
    # Actor
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        index=True,
    )
    
    # Event data
    payload: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    
    # Timestamp (immutable)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    
    __table_args__ = (
        Index("ix_event_logs_entity", "entity_type", "entity_id"),
        Index("ix_event_logs_user_time", "user_id", "created_at"),
        Index("ix_event_logs_type_time", "event_type", "created_at"),
    )
    
    def __repr__(self) -> str:
        event_type = self.event_type.value if hasattr(self.event_type, "value") else self.event_type
        return f"<EventLog {event_type} {self.entity_type}:{self.entity_id}>"
