"""
Portfolio use cases.
"""

from portfolio_manager.kernel.permissions.ownership import ResourceType
from portfolio_manager.schemas.portfolio import PortfolioCreate, PortfolioResponse, PortfolioUpdate
from portfolio_manager.services.base import OwnedResourceService


class PortfolioService(OwnedResourceService[PortfolioResponse]):
    """Portfolios are roots: the caller who creates one owns it."""

    resource_type = ResourceType.PORTFOLIO
    response_model = PortfolioResponse

    async def create(self, data: PortfolioCreate) -> PortfolioResponse:
        """
        Create a portfolio owned by data.owner_id.

        Raises:
            InvalidInputError: missing title or owner
            NotFoundError: no user exists with the given owner ID
            ConflictError: the owner already has a portfolio with this title
        """
        title = self._require_title(data.title, "create")
        owner_id = self._require_caller(data.owner_id, "create")

        await self.guard.ensure_unique(self.resource_type, title, owner_id)

        portfolio = await self.repository.create(
            title=title,
            description=data.description,
            owner_id=owner_id,
        )
        await self._record_create(portfolio, owner_id)
        return self._to_response(portfolio)

    async def update(self, data: PortfolioUpdate) -> PortfolioResponse:
        """
        Update title and/or description. None leaves a field unchanged.

        Renaming a portfolio to its own current title is allowed.
        """
        portfolio_id = self._require_id(data.id, "update")
        owner_id = self._require_caller(data.owner_id, "update")
        changes = {}
        if data.title is not None:
            changes["title"] = self._require_title(data.title, "update")
        if data.description is not None:
            changes["description"] = data.description

        await self.gate.authorize(owner_id, self.resource_type, portfolio_id)

        if "title" in changes:
            await self.guard.ensure_unique(
                self.resource_type, changes["title"], owner_id, exclude_id=portfolio_id
            )

        portfolio = await self._load(portfolio_id, "update")
        await self.repository.update(portfolio, **changes)
        await self._record_update(portfolio_id, changes, owner_id)
        return self._to_response(portfolio)
