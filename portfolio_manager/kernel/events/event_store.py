"""
Event Store service for append-only audit logging.

Mutation events are added to the session of the unit of work that performs
the write, so an event row commits iff the change it describes commits.
Every event is also echoed to the audit logger.
"""

import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import select, and_, desc, func
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_manager.config import get_settings
from portfolio_manager.kernel.events.audit import EntityId
from portfolio_manager.kernel.models.event_log import EventLog, EventType


class EventStore:
    """
    AuditRecorder backed by the immutable event log.

    Usage:
        event_store = EventStore(session)
        await event_store.log_create(
            "category",
            category.id,
            {"title": category.title, "portfolio_id": category.portfolio_id},
            user_id=caller_id,
        )
    """

    def __init__(self, session: AsyncSession, logger_name: Optional[str] = None):
        self.session = session
        self.logger = logging.getLogger(logger_name or get_settings().audit_logger_name)

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: EntityId,
        user_id: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> EventLog:
        """
        Append an event to the audit log.

        Args:
            event_type: The type of event
            entity_type: The type of entity (portfolio, category, ...)
            entity_id: The ID of the entity, 0 for batch operations
            user_id: The ID of the user who triggered the event
            payload: Additional event data

        Returns:
            The pending EventLog record
        """
        # Ensure payload is JSON-serializable
        if payload:
            payload = self._serialize_payload(payload)

        event = EventLog(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=str(entity_id),
            user_id=user_id,
            payload=payload or {},
        )

        self.session.add(event)
        # Note: the unit of work flushes/commits with the write it describes
        return event

    async def log_create(
        self,
        entity: str,
        entity_id: EntityId,
        data: Dict[str, Any],
        user_id: Optional[str] = None,
    ) -> None:
        await self.log(EventType.ENTITY_CREATED, entity, entity_id, user_id, data)
        self.logger.info(
            "Entity created",
            extra={
                "event": "create",
                "entity": entity,
                "entity_id": entity_id,
                "user_id": user_id,
                "data": data,
            },
        )

    async def log_update(
        self,
        entity: str,
        entity_id: EntityId,
        data: Dict[str, Any],
        user_id: Optional[str] = None,
    ) -> None:
        await self.log(EventType.ENTITY_UPDATED, entity, entity_id, user_id, data)
        self.logger.info(
            "Entity updated",
            extra={
                "event": "update",
                "entity": entity,
                "entity_id": entity_id,
                "user_id": user_id,
                "data": data,
            },
        )

    async def log_delete(
        self,
        entity: str,
        entity_id: EntityId,
        data: Dict[str, Any],
        user_id: Optional[str] = None,
    ) -> None:
        await self.log(EventType.ENTITY_DELETED, entity, entity_id, user_id, data)
        self.logger.info(
            "Entity deleted",
            extra={
                "event": "delete",
                "entity": entity,
                "entity_id": entity_id,
                "user_id": user_id,
                "data": data,
            },
        )

    async def log_access(
        self,
        entity: str,
        entity_id: EntityId,
        user_id: str,
        allowed: bool,
    ) -> None:
        event_type = EventType.ACCESS_GRANTED if allowed else EventType.ACCESS_DENIED
        await self.log(event_type, entity, entity_id, user_id, {"allowed": allowed})
        extra = {
            "event": "access",
            "entity": entity,
            "entity_id": entity_id,
            "user_id": user_id,
            "allowed": allowed,
        }
        if allowed:
            self.logger.info("Access granted", extra=extra)
        else:
            self.logger.warning("Access denied", extra=extra)

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: EntityId,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[EventLog]:
        """
        Get the event history for a specific entity.

        Args:
            entity_type: The type of entity
            entity_id: The ID of the entity
            event_types: Optional filter for specific event types
            limit: Maximum number of events to return
            offset: Number of events to skip

        Returns:
            List of EventLog records, newest first
        """
        query = select(EventLog).where(
            and_(
                EventLog.entity_type == entity_type,
                EventLog.entity_id == str(entity_id),
            )
        )

        if event_types:
            query = query.where(EventLog.event_type.in_(event_types))

        query = query.order_by(desc(EventLog.created_at)).offset(offset).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_user_activity(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """
        Get all events triggered by a specific user.

        Args:
            user_id: The user ID
            since: Start datetime filter
            until: End datetime filter
            event_types: Optional filter for specific event types
            limit: Maximum number of events

        Returns:
            List of EventLog records, newest first
        """
        query = select(EventLog).where(EventLog.user_id == user_id)

        if since:
            query = query.where(EventLog.created_at >= since)
        if until:
            query = query.where(EventLog.created_at <= until)
        if event_types:
            query = query.where(EventLog.event_type.in_(event_types))

        query = query.order_by(desc(EventLog.created_at)).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_events(
        self,
        entity_type: Optional[str] = None,
        entity_id: Optional[EntityId] = None,
        event_type: Optional[EventType] = None,
        user_id: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> int:
        """
        Count events matching the given criteria.

        Args:
            entity_type: Filter by entity type
            entity_id: Filter by entity ID
            event_type: Filter by event type
            user_id: Filter by user ID
            since: Start datetime filter

        Returns:
            Count of matching events
        """
        query = select(func.count(EventLog.id))

        if entity_type:
            query = query.where(EventLog.entity_type == entity_type)
        if entity_id is not None:
            query = query.where(EventLog.entity_id == str(entity_id))
        if event_type:
            query = query.where(EventLog.event_type == event_type)
        if user_id:
            query = query.where(EventLog.user_id == user_id)
        if since:
            query = query.where(EventLog.created_at >= since)

        result = await self.session.execute(query)
        return result.scalar() or 0

    def _serialize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Ensure payload is JSON-serializable.

        Converts UUIDs, datetimes and enums to strings.
        """
        def serialize_value(value: Any) -> Any:
            if isinstance(value, uuid.UUID):
                return str(value)
            if isinstance(value, datetime):
                return value.isoformat()
            if isinstance(value, Enum):
                return value.value
            if isinstance(value, dict):
                return {k: serialize_value(v) for k, v in value.items()}
            if isinstance(value, (list, tuple)):
                return [serialize_value(v) for v in value]
            return value

        return serialize_value(payload)
