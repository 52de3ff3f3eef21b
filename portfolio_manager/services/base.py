"""
Shared use-case flow for owned resources.

Every mutating operation runs the same steps in order:
validate input, authorize through the owner chain, check duplicate
titles, write, record the audit event, bump metrics. Any step that fails
stops the flow, so a rejected call leaves storage untouched.
"""

from typing import Any, ClassVar, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from portfolio_manager.kernel.errors import (
    InvalidInputError,
    NotFoundError,
    require_id,
    require_text,
)
from portfolio_manager.kernel.events.audit import AuditRecorder
from portfolio_manager.kernel.guards.duplicate_guard import DuplicateGuard
from portfolio_manager.kernel.metrics.collector import MetricsRecorder
from portfolio_manager.kernel.ordering.position_manager import PositionManager
from portfolio_manager.kernel.permissions.gate import AuthorizationGate
from portfolio_manager.kernel.permissions.ownership import (
    PARENT_LINKS,
    OwnershipResolver,
    ResourceType,
)
from portfolio_manager.kernel.repositories.base import ResourceRepository
from portfolio_manager.schemas.common import PaginatedResponse, Pagination, PositionUpdate

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class OwnedResourceService(Generic[ResponseT]):
    """Get, list and delete for any owned resource."""

    resource_type: ClassVar[ResourceType]
    response_model: ClassVar[Type[BaseModel]]

    def __init__(
        self,
        repository: ResourceRepository,
        resolver: OwnershipResolver,
        gate: AuthorizationGate,
        guard: DuplicateGuard,
        positions: PositionManager,
        audit: AuditRecorder,
        metrics: Optional[MetricsRecorder] = None,
    ):
        self.repository = repository
        self.resolver = resolver
        self.gate = gate
        self.guard = guard
        self.positions = positions
        self.audit = audit
        self.metrics = metrics

    @property
    def entity(self) -> str:
        return self.resource_type.value

    # -- validation helpers -------------------------------------------------

    def _require_id(self, value: Optional[int], operation: str, field: Optional[str] = None) -> int:
        return require_id(value, field or f"{self.entity} ID", entity=self.entity, operation=operation)

    def _require_caller(self, caller_id: Optional[str], operation: str) -> str:
        return require_text(caller_id, "owner ID", entity=self.entity, operation=operation)

    def _require_text(self, value: Optional[str], field: str, operation: str) -> str:
        return require_text(value, field, entity=self.entity, operation=operation).strip()

    def _require_title(self, title: Optional[str], operation: str) -> str:
        return self._require_text(title, "title", operation)

    def _require_non_negative(self, value: Optional[int], field: str, operation: str) -> int:
        if value is None or value < 0:
            raise InvalidInputError(
                f"{field} must be a non-negative integer",
                entity=self.entity,
                operation=operation,
                details={field: value},
            )
        return value

    # -- shared steps -------------------------------------------------------

    def _to_response(self, row: Any) -> ResponseT:
        return self.response_model.model_validate(row)

    async def _load(self, resource_id: int, operation: str) -> Any:
        row = await self.repository.get_by_id(resource_id)
        if row is None:
            raise NotFoundError(
                f"{self.entity} not found",
                entity=self.entity,
                operation=operation,
                details={"id": resource_id},
            )
        return row

    async def _record_create(self, row: Any, caller_id: str) -> None:
        await self.audit.log_create(self.entity, row.id, self.repository.snapshot(row), user_id=caller_id)
        if self.metrics is not None:
            self.metrics.increment_created(self.entity)

    async def _record_update(self, resource_id: int, data: Dict[str, Any], caller_id: str) -> None:
        await self.audit.log_update(
            self.entity, resource_id, {**data, "owner_id": caller_id}, user_id=caller_id
        )
        if self.metrics is not None:
            self.metrics.increment_updated(self.entity)

    # -- operations ---------------------------------------------------------

    async def get(self, resource_id: int, caller_id: str) -> ResponseT:
        """
        Fetch a resource the caller owns.

        Raises:
            InvalidInputError: missing ID or caller
            NotFoundError: the resource or an ancestor is missing
            UnauthorizedError: the caller is not the owner
        """
        self._require_id(resource_id, "get")
        self._require_caller(caller_id, "get")
        await self.gate.authorize(caller_id, self.resource_type, resource_id, audit_granted=True)
        return self._to_response(await self._load(resource_id, "get"))

    async def get_public(self, resource_id: int) -> ResponseT:
        """Fetch a resource without authorization, for published pages."""
        self._require_id(resource_id, "get")
        return self._to_response(await self._load(resource_id, "get"))

    async def list(
        self,
        owner_id: str,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResponse[ResponseT]:
        """One page of the owner's resources, newest first."""
        self._require_caller(owner_id, "list")
        pagination = pagination or Pagination()
        rows, total = await self.repository.get_by_owner_id(owner_id, pagination)
        return PaginatedResponse.create(
            [self._to_response(row) for row in rows],
            total,
            pagination,
        )

    async def delete(self, resource_id: int, caller_id: str) -> None:
        """
        Delete a resource the caller owns, together with its descendants.

        Raises:
            InvalidInputError: missing ID or caller
            NotFoundError: the resource or an ancestor is missing
            UnauthorizedError: the caller is not the owner
        """
        self._require_id(resource_id, "delete")
        self._require_caller(caller_id, "delete")
        await self.gate.authorize(caller_id, self.resource_type, resource_id)

        row = await self._load(resource_id, "delete")
        snapshot = self.repository.snapshot(row)
        await self.repository.delete(resource_id)

        await self.audit.log_delete(self.entity, resource_id, snapshot, user_id=caller_id)
        if self.metrics is not None:
            self.metrics.increment_deleted(self.entity)


class ChildResourceService(OwnedResourceService[ResponseT]):
    """Adds listings scoped to one parent."""

    @property
    def parent_type(self) -> ResourceType:
        return PARENT_LINKS[self.resource_type].parent_type

    async def list_by_parent(self, parent_id: int, caller_id: str) -> List[ResponseT]:
        """Children of a parent the caller owns, in sibling order."""
        self._require_id(parent_id, "list", field=f"{self.parent_type.value} ID")
        self._require_caller(caller_id, "list")
        await self.gate.authorize(caller_id, self.parent_type, parent_id)
        rows = await self.repository.get_by_parent_id(parent_id)
        return [self._to_response(row) for row in rows]

    async def list_by_parent_public(self, parent_id: int) -> List[ResponseT]:
        """Children of any existing parent, in sibling order."""
        self._require_id(parent_id, "list", field=f"{self.parent_type.value} ID")
        await self.resolver.resolve_chain(self.parent_type, parent_id)
        rows = await self.repository.get_by_parent_id(parent_id)
        return [self._to_response(row) for row in rows]


class OrderedResourceService(ChildResourceService[ResponseT]):
    """Adds single moves and bulk reorders."""

    async def update_position(self, resource_id: int, position: int, caller_id: str) -> None:
        self._require_caller(caller_id, "update position")
        await self.positions.update_position(self.resource_type, resource_id, position, caller_id)

    async def bulk_reorder(self, items: Sequence[PositionUpdate], caller_id: str) -> None:
        """Apply every (id, position) pair or none of them."""
        await self.positions.bulk_update_positions(self.resource_type, items, caller_id)
