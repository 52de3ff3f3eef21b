"""
Audit trail infrastructure.

Provides the AuditRecorder contract and the append-only EventStore.
"""

from portfolio_manager.kernel.events.audit import AuditRecorder, EntityId
from portfolio_manager.kernel.events.event_store import EventStore

__all__ = [
    "AuditRecorder",
    "EntityId",
    "EventStore",
]
