"""
Section use cases.
"""

from typing import List, Optional

from portfolio_manager.kernel.permissions.ownership import ResourceType
from portfolio_manager.schemas.section import SectionCreate, SectionResponse, SectionUpdate
from portfolio_manager.services.base import OrderedResourceService


class SectionService(OrderedResourceService[SectionResponse]):
    resource_type = ResourceType.SECTION
    response_model = SectionResponse

    async def create(self, data: SectionCreate) -> SectionResponse:
        """
        Create a section in a portfolio the caller owns.

        Raises:
            InvalidInputError: missing title, type, owner or portfolio, or a negative position
            NotFoundError: the portfolio does not exist
            UnauthorizedError: the caller does not own the portfolio
            ConflictError: the portfolio already has a section with this title
        """
        title = self._require_title(data.title, "create")
        owner_id = self._require_caller(data.owner_id, "create")
        portfolio_id = self._require_id(data.portfolio_id, "create", field="portfolio ID")
        section_type = self._require_type(data.type, "create")
        position = self._require_non_negative(data.position, "position", "create")

        await self.gate.authorize(owner_id, ResourceType.PORTFOLIO, portfolio_id)
        await self.guard.ensure_unique(self.resource_type, title, portfolio_id)

        section = await self.repository.create(
            title=title,
            description=data.description,
            type=section_type,
            position=position,
            owner_id=owner_id,
            portfolio_id=portfolio_id,
        )
        await self._record_create(section, owner_id)
        return self._to_response(section)

    async def update(self, data: SectionUpdate) -> SectionResponse:
        """Update title, description, type and/or position. None leaves a field unchanged."""
        section_id = self._require_id(data.id, "update")
        owner_id = self._require_caller(data.owner_id, "update")
        changes = {}
        if data.title is not None:
            changes["title"] = self._require_title(data.title, "update")
        if data.description is not None:
            changes["description"] = data.description
        if data.type is not None:
            changes["type"] = self._require_type(data.type, "update")
        if data.position is not None:
            changes["position"] = self._require_non_negative(data.position, "position", "update")

        await self.gate.authorize(owner_id, self.resource_type, section_id)
        section = await self._load(section_id, "update")

        if "title" in changes:
            await self.guard.ensure_unique(
                self.resource_type, changes["title"], section.portfolio_id, exclude_id=section_id
            )

        await self.repository.update(section, **changes)
        await self._record_update(section_id, changes, owner_id)
        return self._to_response(section)

    async def list_by_type(
        self,
        section_type: str,
        portfolio_id: Optional[int] = None,
    ) -> List[SectionResponse]:
        """Public listing of sections of one kind."""
        section_type = self._require_type(section_type, "list")
        rows = await self.repository.get_by_type(section_type, portfolio_id)
        return [self._to_response(row) for row in rows]

    def _require_type(self, section_type: Optional[str], operation: str) -> str:
        return self._require_text(section_type, "type", operation)

