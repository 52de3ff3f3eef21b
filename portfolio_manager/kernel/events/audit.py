"""
Audit sink contract.

Use cases report every committed mutation and every access decision through
an AuditRecorder. The default implementation is the EventStore; tests swap
in a recorder that keeps events in memory.
"""

from typing import Any, Dict, Optional, Protocol, Union

EntityId = Union[int, str]


class AuditRecorder(Protocol):
    """Append-only sink for mutation and access events."""

    async def log_create(
        self,
        entity: str,
        entity_id: EntityId,
        data: Dict[str, Any],
        user_id: Optional[str] = None,
    ) -> None:
        ...

    async def log_update(
        self,
        entity: str,
        entity_id: EntityId,
        data: Dict[str, Any],
        user_id: Optional[str] = None,
    ) -> None:
        ...

    async def log_delete(
        self,
        entity: str,
        entity_id: EntityId,
        data: Dict[str, Any],
        user_id: Optional[str] = None,
    ) -> None:
        ...

    async def log_access(
        self,
        entity: str,
        entity_id: EntityId,
        user_id: str,
        allowed: bool,
    ) -> None:
        ...
