"""
Category use cases.
"""

from portfolio_manager.kernel.permissions.ownership import ResourceType
from portfolio_manager.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from portfolio_manager.services.base import OrderedResourceService


class CategoryService(OrderedResourceService[CategoryResponse]):
    resource_type = ResourceType.CATEGORY
    response_model = CategoryResponse

    async def create(self, data: CategoryCreate) -> CategoryResponse:
        """
        Create a category in a portfolio the caller owns.

        Raises:
            InvalidInputError: missing title, owner or portfolio, or a negative position
            NotFoundError: the portfolio does not exist
            UnauthorizedError: the caller does not own the portfolio
            ConflictError: the portfolio already has a category with this title
        """
        title = self._require_title(data.title, "create")
        owner_id = self._require_caller(data.owner_id, "create")
        portfolio_id = self._require_id(data.portfolio_id, "create", field="portfolio ID")
        position = self._require_non_negative(data.position, "position", "create")

        await self.gate.authorize(owner_id, ResourceType.PORTFOLIO, portfolio_id)
        await self.guard.ensure_unique(self.resource_type, title, portfolio_id)

        category = await self.repository.create(
            title=title,
            description=data.description,
            position=position,
            owner_id=owner_id,
            portfolio_id=portfolio_id,
        )
        await self._record_create(category, owner_id)
        return self._to_response(category)

    async def update(self, data: CategoryUpdate) -> CategoryResponse:
        """Update title, description and/or position. None leaves a field unchanged."""
        category_id = self._require_id(data.id, "update")
        owner_id = self._require_caller(data.owner_id, "update")
        changes = {}
        if data.title is not None:
            changes["title"] = self._require_title(data.title, "update")
        if data.description is not None:
            changes["description"] = data.description
        if data.position is not None:
            changes["position"] = self._require_non_negative(data.position, "position", "update")

        await self.gate.authorize(owner_id, self.resource_type, category_id)
        category = await self._load(category_id, "update")

        if "title" in changes:
            await self.guard.ensure_unique(
                self.resource_type, changes["title"], category.portfolio_id, exclude_id=category_id
            )

        await self.repository.update(category, **changes)
        await self._record_update(category_id, changes, owner_id)
        return self._to_response(category)
