"""
Sibling title uniqueness.

Titles are unique per owner for portfolios and per portfolio for
categories and sections. The check here is the fast path; the unique
constraint on (scope, title_key) is authoritative when two writers race.
"""

from typing import Any, Mapping

from portfolio_manager.kernel.errors import ConflictError
from portfolio_manager.kernel.permissions.ownership import ResourceType
from portfolio_manager.kernel.repositories.base import ResourceRepository


class DuplicateGuard:
    """Rejects a title that a sibling in the same scope already uses."""

    def __init__(self, repositories: Mapping[ResourceType, ResourceRepository]):
        self.repositories = repositories

    async def check_duplicate(
        self,
        resource_type: ResourceType,
        title: str,
        scope_id: Any,
        exclude_id: int = 0,
    ) -> bool:
        return await self.repositories[resource_type].check_title_duplicate(
            title, scope_id, exclude_id
        )

    async def ensure_unique(
        self,
        resource_type: ResourceType,
        title: str,
        scope_id: Any,
        exclude_id: int = 0,
    ) -> None:
        """
        Raise ConflictError if the title is taken in scope.

        Args:
            resource_type: PORTFOLIO, CATEGORY or SECTION
            title: Candidate title
            scope_id: Owner ID for portfolios, portfolio ID otherwise
            exclude_id: The resource being renamed, 0 on create
        """
        if await self.check_duplicate(resource_type, title, scope_id, exclude_id):
            raise ConflictError(
                f"{resource_type.value} with title '{title.strip()}' already exists",
                entity=resource_type.value,
                operation="update" if exclude_id else "create",
                details={"title": title, "scope_id": scope_id},
            )
