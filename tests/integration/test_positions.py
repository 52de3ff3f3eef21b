"""
Integration tests for single moves and bulk reorders.
"""

import pytest
import pytest_asyncio

from portfolio_manager.kernel.errors import (
    InternalError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from portfolio_manager.kernel.models import EventType
from portfolio_manager.kernel.permissions import ResourceType
from portfolio_manager.schemas import (
    CategoryCreate,
    PositionUpdate,
    ProjectCreate,
    SectionContentCreate,
    SectionCreate,
)


@pytest_asyncio.fixture
async def categories(uow, u1, portfolio_p1):
    """C1 at position 0 and C2 at position 1 in P1."""
    async with uow() as container:
        c1 = await container.categories.create(
            CategoryCreate(owner_id=u1, portfolio_id=portfolio_p1, title="C1", position=0)
        )
        c2 = await container.categories.create(
            CategoryCreate(owner_id=u1, portfolio_id=portfolio_p1, title="C2", position=1)
        )
    return c1.id, c2.id


async def _positions(uow, portfolio_id):
    async with uow() as container:
        rows = await container.categories.list_by_parent_public(portfolio_id)
    return {row.id: row.position for row in rows}


class TestUpdatePosition:
    
    async def test_moves_only_the_target(self, uow, u1, portfolio_p1, categories):
        """Moving one category leaves its siblings where they were."""
        c1, c2 = categories
        
        async with uow() as container:
            await container.categories.update_position(c1, 7, u1)
        
        assert await _positions(uow, portfolio_p1) == {c1: 7, c2: 1}
    
    async def test_ties_list_by_id(self, uow, u1, portfolio_p1, categories):
        """Siblings sharing a position list in ID order."""
        c1, c2 = categories
        
        async with uow() as container:
            await container.categories.update_position(c2, 0, u1)
            rows = await container.categories.list_by_parent(portfolio_p1, u1)
        
        assert [row.id for row in rows] == [c1, c2]
    
    async def test_negative_position_is_invalid(self, uow, u1, categories):
        """Negative positions are rejected."""
        with pytest.raises(InvalidInputError):
            async with uow() as container:
                await container.categories.update_position(categories[0], -1, u1)
    
    async def test_missing_item(self, uow, u1, categories):
        """Moving a missing category is not found."""
        with pytest.raises(NotFoundError):
            async with uow() as container:
                await container.categories.update_position(9999, 1, u1)
    
    async def test_projects_are_not_ordered(self, uow, u1, categories):
        """Projects have no position to move."""
        async with uow() as container:
            project = await container.projects.create(
                ProjectCreate(owner_id=u1, category_id=categories[0], title="PR", description="d")
            )
        
        with pytest.raises(InvalidInputError):
            async with uow() as container:
                await container.positions.update_position(ResourceType.PROJECT, project.id, 1, u1)


class TestBulkReorder:
    
    async def test_swap(self, uow, u1, portfolio_p1, categories, metrics):
        """Two categories swap places in one batch with one audit event."""
        c1, c2 = categories
        
        async with uow() as container:
            await container.categories.bulk_reorder(
                [PositionUpdate(id=c1, position=1), PositionUpdate(id=c2, position=0)],
                u1,
            )
        
        async with uow() as container:
            rows = await container.categories.list_by_parent(portfolio_p1, u1)
            events = await container.audit.get_entity_history(
                "category", 0, event_types=[EventType.ENTITY_UPDATED]
            )
        
        assert [row.id for row in rows] == [c2, c1]
        assert len(events) == 1
        assert events[0].payload == {"operation": "bulk_reorder", "count": 2, "owner_id": u1}
        assert events[0].user_id == u1
        assert metrics.sample("bulk_reorders_total", "category") == 1
    
    async def test_foreign_parent_applies_nothing(self, uow, u1, u2, portfolio_p1, portfolio_p2, categories):
        """One foreign item in the batch leaves every item unmoved."""
        c1, c2 = categories
        async with uow() as container:
            foreign = await container.categories.create(
                CategoryCreate(owner_id=u2, portfolio_id=portfolio_p2, title="Theirs", position=3)
            )
        
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.categories.bulk_reorder(
                    [PositionUpdate(id=c1, position=5), PositionUpdate(id=foreign.id, position=6)],
                    u1,
                )
        
        assert await _positions(uow, portfolio_p1) == {c1: 0, c2: 1}
        assert await _positions(uow, portfolio_p2) == {foreign.id: 3}
    
    async def test_missing_id_applies_nothing(self, uow, u1, portfolio_p1, categories):
        """One unknown ID in the batch leaves every item unmoved."""
        c1, c2 = categories
        
        with pytest.raises(NotFoundError) as exc_info:
            async with uow() as container:
                await container.categories.bulk_reorder(
                    [PositionUpdate(id=c1, position=5), PositionUpdate(id=9999, position=1)],
                    u1,
                )
        
        assert exc_info.value.details["missing"] == [9999]
        assert await _positions(uow, portfolio_p1) == {c1: 0, c2: 1}
    
    async def test_write_failure_rolls_back_every_item(self, uow, u1, portfolio_p1, categories, monkeypatch):
        """A storage failure mid-batch leaves every item unmoved."""
        c1, c2 = categories
        
        async with uow() as container:
            repository = container.repositories[ResourceType.CATEGORY]
            original = repository.update_position
            calls = []
            
            async def flaky_update_position(resource_id, position):
                calls.append(resource_id)
                if len(calls) == 2:
                    raise InternalError("disk full", entity="category", operation="update position")
                await original(resource_id, position)
            
            monkeypatch.setattr(repository, "update_position", flaky_update_position)
            
            with pytest.raises(InternalError):
                await container.categories.bulk_reorder(
                    [PositionUpdate(id=c1, position=8), PositionUpdate(id=c2, position=9)],
                    u1,
                )
        
        assert calls == [c1, c2]
        assert await _positions(uow, portfolio_p1) == {c1: 0, c2: 1}
    
    @pytest.mark.parametrize(
        "items",
        [
            [],
            [PositionUpdate(id=0, position=1)],
            [PositionUpdate(id=1, position=-1)],
            [PositionUpdate(id=1, position=1), PositionUpdate(id=1, position=2)],
        ],
    )
    async def test_invalid_batches(self, uow, u1, categories, items):
        """Empty batches, bad IDs, negative positions and repeats are rejected."""
        with pytest.raises(InvalidInputError):
            async with uow() as container:
                await container.categories.bulk_reorder(items, u1)
    
    async def test_missing_caller(self, uow, categories):
        """A batch without a caller is rejected."""
        with pytest.raises(InvalidInputError):
            async with uow() as container:
                await container.categories.bulk_reorder([PositionUpdate(id=categories[0], position=1)], "")


class TestSectionOrdering:
    
    async def test_sections_reorder(self, uow, u1, portfolio_p1):
        """Sections reorder within their portfolio."""
        async with uow() as container:
            s1 = await container.sections.create(SectionCreate(owner_id=u1, portfolio_id=portfolio_p1, title="S1"))
            s2 = await container.sections.create(
                SectionCreate(owner_id=u1, portfolio_id=portfolio_p1, title="S2", position=1)
            )
            await container.sections.bulk_reorder(
                [PositionUpdate(id=s1.id, position=2), PositionUpdate(id=s2.id, position=0)], u1
            )
        
        async with uow() as container:
            rows = await container.sections.list_by_parent_public(portfolio_p1)
        assert [row.id for row in rows] == [s2.id, s1.id]
    
    async def test_section_contents_reorder_through_section(self, uow, u1, u2, portfolio_p1):
        """Section contents reorder by order, guarded through their section."""
        async with uow() as container:
            section = await container.sections.create(
                SectionCreate(owner_id=u1, portfolio_id=portfolio_p1, title="About")
            )
            first = await container.section_contents.create(
                SectionContentCreate(owner_id=u1, section_id=section.id, type="text", content="a", order=0)
            )
            second = await container.section_contents.create(
                SectionContentCreate(owner_id=u1, section_id=section.id, type="image", image_id=4, order=1)
            )
        
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.section_contents.bulk_reorder(
                    [PositionUpdate(id=first.id, position=1), PositionUpdate(id=second.id, position=0)], u2
                )
        
        async with uow() as container:
            await container.section_contents.bulk_reorder(
                [PositionUpdate(id=first.id, position=1), PositionUpdate(id=second.id, position=0)], u1
            )
            await container.section_contents.update_order(first.id, 5, u1)
        
        async with uow() as container:
            rows = await container.section_contents.list_by_parent(section.id, u1)
        assert [(row.id, row.order) for row in rows] == [(second.id, 0), (first.id, 5)]
