"""
Section content storage. Sibling order lives in the `order` column.
"""

from typing import List, Tuple

from sqlalchemy import select

from portfolio_manager.kernel.models import Portfolio, Section, SectionContent
from portfolio_manager.kernel.repositories.base import ResourceRepository, storage_errors


class SectionContentRepository(ResourceRepository[SectionContent]):
    model = SectionContent
    entity = "section_content"
    parent_attr = "section_id"
    order_attr = "order"

    async def update_order(self, content_id: int, order: int) -> None:
        await self.update_position(content_id, order)

    async def find_owner_drift(self) -> List[Tuple[int, str, str]]:
        query = (
            select(SectionContent.id, SectionContent.owner_id, Portfolio.owner_id)
            .join(Section, SectionContent.section_id == Section.id)
            .join(Portfolio, Section.portfolio_id == Portfolio.id)
            .where(SectionContent.owner_id != Portfolio.owner_id)
            .order_by(SectionContent.id)
        )
        with storage_errors(self.entity, "find owner drift"):
            result = await self.session.execute(query)
            return [tuple(row) for row in result.all()]
