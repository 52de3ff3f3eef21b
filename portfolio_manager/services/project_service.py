"""
Project use cases, including the public skill and client searches.
"""

from typing import List, Sequence

from portfolio_manager.kernel.errors import InvalidInputError
from portfolio_manager.kernel.permissions.ownership import ResourceType
from portfolio_manager.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from portfolio_manager.services.base import ChildResourceService


def _clean_list(values: Sequence[str]) -> List[str]:
    return [value.strip() for value in values if value and value.strip()]


class ProjectService(ChildResourceService[ProjectResponse]):
    """Projects live under categories and are neither ordered nor title-unique."""

    resource_type = ResourceType.PROJECT
    response_model = ProjectResponse

    async def create(self, data: ProjectCreate) -> ProjectResponse:
        """
        Create a project in a category the caller owns.

        Raises:
            InvalidInputError: missing title, description, owner or category
            NotFoundError: the category or its portfolio does not exist
            UnauthorizedError: the caller does not own the category's portfolio
        """
        title = self._require_title(data.title, "create")
        description = self._require_text(data.description, "description", "create")
        owner_id = self._require_caller(data.owner_id, "create")
        category_id = self._require_id(data.category_id, "create", field="category ID")

        await self.gate.authorize(owner_id, ResourceType.CATEGORY, category_id)

        project = await self.repository.create(
            title=title,
            description=description,
            main_image=data.main_image,
            images=_clean_list(data.images),
            skills=_clean_list(data.skills),
            client=data.client,
            link=data.link,
            owner_id=owner_id,
            category_id=category_id,
        )
        await self._record_create(project, owner_id)
        return self._to_response(project)

    async def update(self, data: ProjectUpdate) -> ProjectResponse:
        """Update any subset of the project's fields. None leaves a field unchanged."""
        project_id = self._require_id(data.id, "update")
        owner_id = self._require_caller(data.owner_id, "update")
        changes = {}
        if data.title is not None:
            changes["title"] = self._require_title(data.title, "update")
        if data.description is not None:
            changes["description"] = self._require_text(data.description, "description", "update")
        for field in ("main_image", "client", "link"):
            value = getattr(data, field)
            if value is not None:
                changes[field] = value
        if data.images is not None:
            changes["images"] = _clean_list(data.images)
        if data.skills is not None:
            changes["skills"] = _clean_list(data.skills)

        await self.gate.authorize(owner_id, self.resource_type, project_id)
        project = await self._load(project_id, "update")
        await self.repository.update(project, **changes)
        await self._record_update(project_id, changes, owner_id)
        return self._to_response(project)

    async def search_by_skills(self, skills: Sequence[str]) -> List[ProjectResponse]:
        """Public search: projects tagged with any of the given skills."""
        wanted = _clean_list(skills or [])
        if not wanted:
            raise InvalidInputError(
                "at least one skill is required",
                entity=self.entity,
                operation="search",
                details={"field": "skills"},
            )
        rows = await self.repository.search_by_skills(wanted)
        return [self._to_response(row) for row in rows]

    async def search_by_client(self, client: str) -> List[ProjectResponse]:
        """Public search: case-insensitive partial match on the client name."""
        client = self._require_text(client, "client", "search")
        rows = await self.repository.search_by_client(client)
        return [self._to_response(row) for row in rows]
