"""
Project storage, including the skill and client lookups.
"""

import json
from typing import List, Sequence, Tuple

from sqlalchemy import String, cast, or_, select

from portfolio_manager.kernel.models import Category, Portfolio, Project
from portfolio_manager.kernel.repositories.base import ResourceRepository, storage_errors


class ProjectRepository(ResourceRepository[Project]):
    """Projects are children of categories. They carry no sibling order and no unique title."""

    model = Project
    entity = "project"
    parent_attr = "category_id"

    async def search_by_skills(self, skills: Sequence[str]) -> List[Project]:
        """Projects listing ANY of the given skills."""
        wanted = [skill.strip() for skill in skills if skill and skill.strip()]
        if not wanted:
            return []
        # skills is stored as JSON text; match each element in its encoded form
        skills_text = cast(Project.skills, String)
        query = (
            select(Project)
            .where(or_(*(skills_text.contains(json.dumps(skill), autoescape=True) for skill in wanted)))
            .order_by(Project.id)
        )
        with storage_errors(self.entity, "search"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def search_by_client(self, client: str) -> List[Project]:
        """Projects whose client contains the given text, case-insensitively."""
        needle = (client or "").strip()
        if not needle:
            return []
        query = (
            select(Project)
            .where(Project.client.icontains(needle, autoescape=True))
            .order_by(Project.id)
        )
        with storage_errors(self.entity, "search"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def find_owner_drift(self) -> List[Tuple[int, str, str]]:
        query = (
            select(Project.id, Project.owner_id, Portfolio.owner_id)
            .join(Category, Project.category_id == Category.id)
            .join(Portfolio, Category.portfolio_id == Portfolio.id)
            .where(Project.owner_id != Portfolio.owner_id)
            .order_by(Project.id)
        )
        with storage_errors(self.entity, "find owner drift"):
            result = await self.session.execute(query)
            return [tuple(row) for row in result.all()]
