"""
Section content use cases.
"""

from typing import Optional

from portfolio_manager.kernel.errors import InvalidInputError
from portfolio_manager.kernel.models import ContentType
from portfolio_manager.kernel.permissions.ownership import ResourceType
from portfolio_manager.schemas.section_content import (
    SectionContentCreate,
    SectionContentResponse,
    SectionContentUpdate,
)
from portfolio_manager.services.base import OrderedResourceService


class SectionContentService(OrderedResourceService[SectionContentResponse]):
    """Content blocks of a section, ordered by `order`."""

    resource_type = ResourceType.SECTION_CONTENT
    response_model = SectionContentResponse

    def _require_content_type(self, content_type: Optional[str], operation: str) -> str:
        value = self._require_text(content_type, "type", operation).lower()
        if value not in {member.value for member in ContentType}:
            raise InvalidInputError(
                "type must be 'text' or 'image'",
                entity=self.entity,
                operation=operation,
                details={"type": content_type},
            )
        return value

    async def create(self, data: SectionContentCreate) -> SectionContentResponse:
        """
        Add a content block to a section the caller owns.

        Raises:
            InvalidInputError: missing section, owner or type, unknown type, negative order
            NotFoundError: the section or its portfolio does not exist
            UnauthorizedError: the caller does not own the section's portfolio
        """
        section_id = self._require_id(data.section_id, "create", field="section ID")
        content_type = self._require_content_type(data.type, "create")
        owner_id = self._require_caller(data.owner_id, "create")
        order = self._require_non_negative(data.order, "order", "create")

        await self.gate.authorize(owner_id, ResourceType.SECTION, section_id)

        content = await self.repository.create(
            section_id=section_id,
            type=content_type,
            content=data.content,
            order=order,
            image_id=data.image_id,
            owner_id=owner_id,
        )
        await self._record_create(content, owner_id)
        return self._to_response(content)

    async def update(self, data: SectionContentUpdate) -> SectionContentResponse:
        """Update type, content, order and/or image. None leaves a field unchanged."""
        content_id = self._require_id(data.id, "update")
        owner_id = self._require_caller(data.owner_id, "update")
        changes = {}
        if data.type is not None:
            changes["type"] = self._require_content_type(data.type, "update")
        if data.content is not None:
            changes["content"] = data.content
        if data.order is not None:
            changes["order"] = self._require_non_negative(data.order, "order", "update")
        if data.image_id is not None:
            changes["image_id"] = data.image_id

        await self.gate.authorize(owner_id, self.resource_type, content_id)
        content = await self._load(content_id, "update")
        await self.repository.update(content, **changes)
        await self._record_update(content_id, changes, owner_id)
        return self._to_response(content)

    async def update_order(self, content_id: int, order: int, caller_id: str) -> None:
        await self.update_position(content_id, order, caller_id)
