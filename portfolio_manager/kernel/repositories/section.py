"""
Section storage.
"""

from typing import List, Optional, Tuple

from sqlalchemy import select

from portfolio_manager.kernel.models import Portfolio, Section
from portfolio_manager.kernel.repositories.base import ResourceRepository, storage_errors


class SectionRepository(ResourceRepository[Section]):
    model = Section
    entity = "section"
    parent_attr = "portfolio_id"
    order_attr = "position"
    title_scope_attr = "portfolio_id"

    async def get_by_type(
        self,
        section_type: str,
        portfolio_id: Optional[int] = None,
    ) -> List[Section]:
        """Sections of one kind, optionally limited to a portfolio, in sibling order."""
        query = select(Section).where(Section.type == section_type)
        if portfolio_id is not None:
            query = query.where(Section.portfolio_id == portfolio_id)
        query = query.order_by(Section.portfolio_id, Section.position, Section.id)
        with storage_errors(self.entity, "list"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def find_owner_drift(self) -> List[Tuple[int, str, str]]:
        query = (
            select(Section.id, Section.owner_id, Portfolio.owner_id)
            .join(Portfolio, Section.portfolio_id == Portfolio.id)
            .where(Section.owner_id != Portfolio.owner_id)
            .order_by(Section.id)
        )
        with storage_errors(self.entity, "find owner drift"):
            result = await self.session.execute(query)
            return [tuple(row) for row in result.all()]
