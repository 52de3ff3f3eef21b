"""
Position management for ordered siblings.

Categories and sections are ordered by `position` within their portfolio;
section contents by `order` within their section. Positions are plain
non-negative integers: moving one item never renumbers its siblings, and
gaps and ties are allowed (ties list by ID).
"""

from typing import Mapping, Optional, Sequence

from portfolio_manager.kernel.errors import InvalidInputError, NotFoundError, PortfolioManagerError
from portfolio_manager.kernel.events.audit import AuditRecorder
from portfolio_manager.kernel.metrics.collector import MetricsRecorder
from portfolio_manager.kernel.permissions.gate import AuthorizationGate
from portfolio_manager.kernel.permissions.ownership import PARENT_LINKS, ResourceType
from portfolio_manager.kernel.repositories.base import ResourceRepository
from portfolio_manager.logging_config import get_logger
from portfolio_manager.schemas.common import PositionUpdate

logger = get_logger(__name__)

ORDERED_TYPES = frozenset((
    ResourceType.CATEGORY,
    ResourceType.SECTION,
    ResourceType.SECTION_CONTENT,
))


class PositionManager:
    """Single moves and all-or-nothing bulk reorders."""

    def __init__(
        self,
        repositories: Mapping[ResourceType, ResourceRepository],
        gate: AuthorizationGate,
        audit: AuditRecorder,
        metrics: Optional[MetricsRecorder] = None,
    ):
        self.repositories = repositories
        self.gate = gate
        self.audit = audit
        self.metrics = metrics

    def _repository(self, resource_type: ResourceType, operation: str) -> ResourceRepository:
        if resource_type not in ORDERED_TYPES:
            raise InvalidInputError(
                f"{resource_type.value} has no position",
                entity=resource_type.value,
                operation=operation,
            )
        return self.repositories[resource_type]

    async def update_position(
        self,
        resource_type: ResourceType,
        resource_id: int,
        position: int,
        caller_id: str,
    ) -> None:
        """
        Move one item. Siblings keep their positions.

        Raises:
            InvalidInputError: missing ID or negative position
            NotFoundError: the item or an ancestor is missing
            UnauthorizedError: the caller does not own the item
        """
        entity = resource_type.value
        repository = self._repository(resource_type, "update position")
        if not resource_id or resource_id <= 0:
            raise InvalidInputError(
                f"{entity} ID is required", entity=entity, operation="update position"
            )
        if position is None or position < 0:
            raise InvalidInputError(
                "position must be a non-negative integer",
                entity=entity,
                operation="update position",
                details={"position": position},
            )

        await self.gate.authorize(caller_id, resource_type, resource_id)
        await repository.update_position(resource_id, position)

        await self.audit.log_update(
            entity,
            resource_id,
            {"position": position, "owner_id": caller_id},
            user_id=caller_id,
        )
        if self.metrics is not None:
            self.metrics.increment_updated(entity)

    async def bulk_update_positions(
        self,
        resource_type: ResourceType,
        items: Sequence[PositionUpdate],
        caller_id: str,
    ) -> None:
        """
        Apply a batch of (id, position) pairs atomically.

        Every item is fetched and every distinct parent is authorized before
        anything is written; the writes then share one transaction. If any
        check fails nothing is applied, and if any write fails the session
        is rolled back.

        Raises:
            InvalidInputError: empty batch, missing caller, bad or repeated IDs,
                negative positions
            NotFoundError: any listed item does not exist
            UnauthorizedError: the caller does not own some item's parent
            InternalError: storage failed mid-batch
        """
        entity = resource_type.value
        repository = self._repository(resource_type, "bulk reorder")

        if not items:
            raise InvalidInputError("no items to update", entity=entity, operation="bulk reorder")
        if not caller_id:
            raise InvalidInputError(
                "owner ID is required",
                entity=entity,
                operation="bulk reorder",
                details={"field": "owner_id"},
            )
        ids = [item.id for item in items]
        for item in items:
            if item.id <= 0 or item.position < 0:
                raise InvalidInputError(
                    "each item needs a positive ID and a non-negative position",
                    entity=entity,
                    operation="bulk reorder",
                    details={"id": item.id, "position": item.position},
                )
        if len(set(ids)) != len(ids):
            raise InvalidInputError(
                "duplicate IDs in batch", entity=entity, operation="bulk reorder"
            )

        found = await repository.get_by_ids(ids)
        if len(found) != len(ids):
            missing = sorted(set(ids) - {row.id for row in found})
            raise NotFoundError(
                f"some {entity} items not found",
                entity=entity,
                operation="bulk reorder",
                details={"missing": missing},
            )

        link = PARENT_LINKS[resource_type]
        parent_ids = {getattr(row, link.parent_attr) for row in found}
        await self.gate.authorize_all(caller_id, link.parent_type, parent_ids)

        try:
            await repository.bulk_update_positions([(item.id, item.position) for item in items])
        except PortfolioManagerError:
            await repository.session.rollback()
            logger.error(
                "Bulk reorder rolled back",
                extra={"entity": entity, "count": len(items), "user_id": caller_id},
            )
            raise

        await self.audit.log_update(
            entity,
            0,
            {"operation": "bulk_reorder", "count": len(items), "owner_id": caller_id},
            user_id=caller_id,
        )
        if self.metrics is not None:
            self.metrics.increment_bulk_reorder(entity)
