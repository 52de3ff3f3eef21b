"""
Authorization gate: the single place that compares a caller with an owner.
"""

from typing import Iterable, Optional

from portfolio_manager.kernel.errors import InvalidInputError, UnauthorizedError
from portfolio_manager.kernel.events.audit import AuditRecorder
from portfolio_manager.kernel.metrics.collector import MetricsRecorder
from portfolio_manager.kernel.permissions.ownership import OwnershipResolver, ResourceType


class AuthorizationGate:
    """
    Grants or denies a caller access to one resource.

    A denial records exactly one access-denied audit event and bumps the
    access-denied counter before raising. A missing resource raises
    NotFoundError from the resolver and records nothing.
    """

    def __init__(
        self,
        resolver: OwnershipResolver,
        audit: AuditRecorder,
        metrics: Optional[MetricsRecorder] = None,
    ):
        self.resolver = resolver
        self.audit = audit
        self.metrics = metrics

    async def authorize(
        self,
        caller_id: str,
        resource_type: ResourceType,
        resource_id: int,
        *,
        audit_granted: bool = False,
    ) -> str:
        """
        Ensure the caller owns the resource.

        Args:
            caller_id: Authenticated user ID
            resource_type: Kind of resource being accessed
            resource_id: Resource ID
            audit_granted: Also record an access-granted event (read paths)

        Returns:
            The resolved owner ID (equal to caller_id)

        Raises:
            InvalidInputError: caller_id is empty
            NotFoundError: the resource or an ancestor is missing
            UnauthorizedError: the resolved owner is someone else
        """
        if not caller_id:
            raise InvalidInputError(
                "owner ID is required",
                entity=resource_type.value,
                operation="authorize",
                details={"field": "owner_id"},
            )

        owner_id = await self.resolver.resolve_owner(resource_type, resource_id)

        if owner_id != caller_id:
            await self.audit.log_access(resource_type.value, resource_id, caller_id, False)
            if self.metrics is not None:
                self.metrics.increment_access_denied(resource_type.value)
            raise UnauthorizedError(
                f"you don't own this {resource_type.value}",
                entity=resource_type.value,
                operation="authorize",
                details={"id": resource_id},
            )

        if audit_granted:
            await self.audit.log_access(resource_type.value, resource_id, caller_id, True)
        return owner_id

    async def authorize_all(
        self,
        caller_id: str,
        resource_type: ResourceType,
        resource_ids: Iterable[int],
    ) -> None:
        """Authorize each resource in ascending ID order, stopping at the first denial."""
        for resource_id in sorted(set(resource_ids)):
            await self.authorize(caller_id, resource_type, resource_id)
