"""
Category storage.
"""

from typing import List, Tuple

from sqlalchemy import select

from portfolio_manager.kernel.models import Category, Portfolio
from portfolio_manager.kernel.repositories.base import ResourceRepository, storage_errors


class CategoryRepository(ResourceRepository[Category]):
    model = Category
    entity = "category"
    parent_attr = "portfolio_id"
    order_attr = "position"
    title_scope_attr = "portfolio_id"

    async def find_owner_drift(self) -> List[Tuple[int, str, str]]:
        query = (
            select(Category.id, Category.owner_id, Portfolio.owner_id)
            .join(Portfolio, Category.portfolio_id == Portfolio.id)
            .where(Category.owner_id != Portfolio.owner_id)
            .order_by(Category.id)
        )
        with storage_errors(self.entity, "find owner drift"):
            result = await self.session.execute(query)
            return [tuple(row) for row in result.all()]
