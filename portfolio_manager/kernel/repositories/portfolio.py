"""
Portfolio storage.
"""

from typing import List, Tuple

from portfolio_manager.kernel.models import Portfolio
from portfolio_manager.kernel.repositories.base import ResourceRepository


class PortfolioRepository(ResourceRepository[Portfolio]):
    """Portfolios are roots: their owner_id is authoritative, not a copy."""

    model = Portfolio
    entity = "portfolio"
    title_scope_attr = "owner_id"

    async def find_owner_drift(self) -> List[Tuple[int, str, str]]:
        return []
