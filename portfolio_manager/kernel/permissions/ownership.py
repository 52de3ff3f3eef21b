"""
Ownership resolution for the resource tree.

A resource is owned by whoever owns the Portfolio at the root of its
parent chain:

    Category       -> Portfolio
    Section        -> Portfolio
    Project        -> Category -> Portfolio
    SectionContent -> Section  -> Portfolio

Resolution follows the chain through storage reads on every call. The
owner_id copies kept on child rows are never consulted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from portfolio_manager.kernel.errors import NotFoundError
from portfolio_manager.kernel.repositories.base import ResourceRepository
from portfolio_manager.logging_config import get_logger

logger = get_logger(__name__)


class ResourceType(str, Enum):
    """Owned resource kinds. Values double as audit and metrics entity names."""
    PORTFOLIO = "portfolio"
    CATEGORY = "category"
    SECTION = "section"
    PROJECT = "project"
    SECTION_CONTENT = "section_content"


@dataclass(frozen=True)
class ParentLink:
    """How to step from a resource to its parent."""
    parent_attr: Optional[str]
    parent_type: Optional[ResourceType]


# One hop per type; PORTFOLIO is the root
PARENT_LINKS: Dict[ResourceType, ParentLink] = {
    ResourceType.PORTFOLIO: ParentLink(None, None),
    ResourceType.CATEGORY: ParentLink("portfolio_id", ResourceType.PORTFOLIO),
    ResourceType.SECTION: ParentLink("portfolio_id", ResourceType.PORTFOLIO),
    ResourceType.PROJECT: ParentLink("category_id", ResourceType.CATEGORY),
    ResourceType.SECTION_CONTENT: ParentLink("section_id", ResourceType.SECTION),
}


@dataclass(frozen=True)
class OwnerChain:
    """Result of walking one resource up to its portfolio."""
    owner_id: str
    portfolio_id: int
    path: Tuple[Tuple[ResourceType, int], ...]


class OwnershipResolver:
    """
    Resolves the true owner of any resource.

    Usage:
        resolver = OwnershipResolver(repositories)
        owner_id = await resolver.resolve_owner(ResourceType.PROJECT, project_id)
    """

    def __init__(self, repositories: Mapping[ResourceType, ResourceRepository]):
        self.repositories = repositories

    async def resolve_chain(self, resource_type: ResourceType, resource_id: int) -> OwnerChain:
        """
        Walk from a resource to its root portfolio.

        Raises:
            NotFoundError: if the resource or any ancestor is missing; details
                name the first missing link
        """
        path: List[Tuple[ResourceType, int]] = []
        current_type, current_id = resource_type, resource_id

        while True:
            path.append((current_type, current_id))
            row = await self.repositories[current_type].get_by_id(current_id)
            if row is None:
                raise NotFoundError(
                    f"{current_type.value} not found",
                    entity=resource_type.value,
                    operation="resolve owner",
                    details={"missing": current_type.value, "id": current_id},
                )

            link = PARENT_LINKS[current_type]
            if link.parent_type is None:
                return OwnerChain(owner_id=row.owner_id, portfolio_id=row.id, path=tuple(path))

            current_type, current_id = link.parent_type, getattr(row, link.parent_attr)

    async def resolve_owner(self, resource_type: ResourceType, resource_id: int) -> str:
        """Owner ID of the portfolio at the root of the resource's chain."""
        chain = await self.resolve_chain(resource_type, resource_id)
        return chain.owner_id

    async def find_drifted_owner_copies(self) -> Dict[ResourceType, List[Tuple[int, str, str]]]:
        """
        Child rows whose stored owner_id differs from the resolved owner.

        Returns:
            Mapping of resource type to (id, stored owner, resolved owner)
            triples; types without drift are omitted
        """
        drift: Dict[ResourceType, List[Tuple[int, str, str]]] = {}
        for resource_type, link in PARENT_LINKS.items():
            if link.parent_type is None:
                continue
            rows = await self.repositories[resource_type].find_owner_drift()
            if rows:
                drift[resource_type] = rows
        return drift

    async def repair_owner_copies(self) -> int:
        """
        Rewrite every drifted owner_id copy from the owner chain.

        Returns:
            Number of rows repaired
        """
        repaired = 0
        drift = await self.find_drifted_owner_copies()
        for resource_type, rows in drift.items():
            repository = self.repositories[resource_type]
            for resource_id, stale_owner, owner_id in rows:
                await repository.set_owner_copy(resource_id, owner_id)
                logger.warning(
                    "Repaired owner copy",
                    extra={
                        "entity": resource_type.value,
                        "entity_id": resource_id,
                        "stale_owner_id": stale_owner,
                        "owner_id": owner_id,
                    },
                )
                repaired += 1
        return repaired
