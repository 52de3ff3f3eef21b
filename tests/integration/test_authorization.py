"""
Integration tests for ownership resolution and authorization.

u1 owns P1 and everything under it; u2 owns nothing there.
"""

import pytest
import pytest_asyncio

from portfolio_manager.kernel.errors import InvalidInputError, NotFoundError, UnauthorizedError
from portfolio_manager.kernel.models import EventType
from portfolio_manager.kernel.permissions import ResourceType
from portfolio_manager.schemas import (
    CategoryCreate,
    CategoryUpdate,
    PositionUpdate,
    ProjectCreate,
    ProjectUpdate,
    SectionContentCreate,
    SectionCreate,
)


@pytest_asyncio.fixture
async def tree(uow, u1, portfolio_p1):
    """P1 -> C1 -> PR1 and P1 -> S1 -> SC1, all created by u1."""
    async with uow() as container:
        c1 = await container.categories.create(
            CategoryCreate(owner_id=u1, portfolio_id=portfolio_p1, title="C1")
        )
        pr1 = await container.projects.create(
            ProjectCreate(owner_id=u1, category_id=c1.id, title="PR1", description="First project")
        )
        s1 = await container.sections.create(
            SectionCreate(owner_id=u1, portfolio_id=portfolio_p1, title="S1")
        )
        sc1 = await container.section_contents.create(
            SectionContentCreate(owner_id=u1, section_id=s1.id, type="text", content="Hello")
        )
    return {"p1": portfolio_p1, "c1": c1.id, "pr1": pr1.id, "s1": s1.id, "sc1": sc1.id}


async def _denials(uow, entity: str, entity_id: int) -> int:
    async with uow() as container:
        return await container.audit.count_events(
            entity_type=entity,
            entity_id=entity_id,
            event_type=EventType.ACCESS_DENIED,
        )


class TestOwnerResolution:
    
    @pytest.mark.parametrize(
        "resource_type, key",
        [
            (ResourceType.PORTFOLIO, "p1"),
            (ResourceType.CATEGORY, "c1"),
            (ResourceType.PROJECT, "pr1"),
            (ResourceType.SECTION, "s1"),
            (ResourceType.SECTION_CONTENT, "sc1"),
        ],
    )
    async def test_every_resource_resolves_to_portfolio_owner(self, uow, u1, tree, resource_type, key):
        """Each resource type resolves to the owner of its portfolio."""
        async with uow() as container:
            owner_id = await container.resolver.resolve_owner(resource_type, tree[key])
        
        assert owner_id == u1
    
    async def test_chain_reports_portfolio(self, uow, tree):
        """The chain lists every level walked up to the portfolio."""
        async with uow() as container:
            chain = await container.resolver.resolve_chain(ResourceType.PROJECT, tree["pr1"])
        
        assert chain.portfolio_id == tree["p1"]
        assert [step[0] for step in chain.path] == [
            ResourceType.PROJECT,
            ResourceType.CATEGORY,
            ResourceType.PORTFOLIO,
        ]
    
    async def test_missing_resource_is_not_found(self, uow, tree):
        """A missing resource names the level that is absent."""
        async with uow() as container:
            with pytest.raises(NotFoundError) as exc_info:
                await container.resolver.resolve_owner(ResourceType.CATEGORY, 9999)
        
        assert exc_info.value.details["missing"] == "category"
    
    async def test_stale_owner_copy_is_ignored(self, uow, u1, u2, tree):
        """Authorization follows the chain even when the child's owner_id copy lies."""
        async with uow() as container:
            await container.repositories[ResourceType.CATEGORY].set_owner_copy(tree["c1"], u2)
            await container.repositories[ResourceType.PROJECT].set_owner_copy(tree["pr1"], u2)
        
        async with uow() as container:
            assert await container.resolver.resolve_owner(ResourceType.CATEGORY, tree["c1"]) == u1
            category = await container.categories.get(tree["c1"], u1)
            assert category.id == tree["c1"]
        
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.projects.update(
                    ProjectUpdate(id=tree["pr1"], owner_id=u2, title="Hijacked")
                )
    
    async def test_repair_rewrites_drifted_copies(self, uow, u1, u2, tree):
        """The repair pass rewrites every stale owner copy and reports the count."""
        async with uow() as container:
            await container.repositories[ResourceType.CATEGORY].set_owner_copy(tree["c1"], u2)
            await container.repositories[ResourceType.SECTION_CONTENT].set_owner_copy(tree["sc1"], u2)
        
        async with uow() as container:
            drift = await container.resolver.find_drifted_owner_copies()
            repaired = await container.resolver.repair_owner_copies()
        
        assert drift == {
            ResourceType.CATEGORY: [(tree["c1"], u2, u1)],
            ResourceType.SECTION_CONTENT: [(tree["sc1"], u2, u1)],
        }
        assert repaired == 2
        
        async with uow() as container:
            assert await container.resolver.find_drifted_owner_copies() == {}
            category = await container.categories.get_public(tree["c1"])
        assert category.owner_id == u1


class TestAuthorizationSymmetry:
    """Every non-owner call fails with one durable access-denied event and no change."""
    
    async def test_get(self, uow, u2, tree):
        """A stranger cannot read another owner's category."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.categories.get(tree["c1"], u2)
        
        assert await _denials(uow, "category", tree["c1"]) == 1
    
    async def test_update(self, uow, u2, tree):
        """A stranger's rename is denied and the title is unchanged."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.categories.update(CategoryUpdate(id=tree["c1"], owner_id=u2, title="Mine"))
        
        assert await _denials(uow, "category", tree["c1"]) == 1
        async with uow() as container:
            assert (await container.categories.get_public(tree["c1"])).title == "C1"
    
    async def test_update_position(self, uow, u2, tree):
        """A stranger's move is denied and the position is unchanged."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.categories.update_position(tree["c1"], 9, u2)
        
        assert await _denials(uow, "category", tree["c1"]) == 1
        async with uow() as container:
            assert (await container.categories.get_public(tree["c1"])).position == 0
    
    async def test_delete(self, uow, u2, tree):
        """A stranger's delete is denied and the row survives."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.categories.delete(tree["c1"], u2)
        
        assert await _denials(uow, "category", tree["c1"]) == 1
        async with uow() as container:
            assert (await container.categories.get_public(tree["c1"])).id == tree["c1"]
    
    async def test_create_under_foreign_parent(self, uow, u2, tree):
        """Creating under someone else's portfolio is denied at the parent."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.sections.create(
                    SectionCreate(owner_id=u2, portfolio_id=tree["p1"], title="Sneaky")
                )
        
        assert await _denials(uow, "portfolio", tree["p1"]) == 1
        async with uow() as container:
            titles = [s.title for s in await container.sections.list_by_parent_public(tree["p1"])]
        assert titles == ["S1"]
    
    async def test_grandchild_through_section(self, uow, u2, tree):
        """Section contents are guarded through their section's portfolio."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.section_contents.delete(tree["sc1"], u2)
        
        assert await _denials(uow, "section_content", tree["sc1"]) == 1
    
    async def test_bulk_reorder(self, uow, u2, tree):
        """A batch under someone else's portfolio is denied at the parent."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.categories.bulk_reorder([PositionUpdate(id=tree["c1"], position=4)], u2)
        
        assert await _denials(uow, "portfolio", tree["p1"]) == 1
    
    async def test_denial_is_counted(self, uow, u2, tree, metrics):
        """Each denial bumps the access-denied counter for the entity."""
        with pytest.raises(UnauthorizedError):
            async with uow() as container:
                await container.projects.get(tree["pr1"], u2)
        
        assert metrics.sample("access_denied_total", "project") == 1
    
    async def test_missing_resource_records_no_denial(self, uow, u2, tree):
        """A missing resource is not found and writes no denial."""
        with pytest.raises(NotFoundError):
            async with uow() as container:
                await container.categories.get(9999, u2)
        
        assert await _denials(uow, "category", 9999) == 0
    
    async def test_owner_read_records_grant(self, uow, u1, tree):
        """An owner's read leaves one access-granted event."""
        async with uow() as container:
            await container.categories.get(tree["c1"], u1)
        
        async with uow() as container:
            granted = await container.audit.count_events(
                entity_type="category",
                entity_id=tree["c1"],
                event_type=EventType.ACCESS_GRANTED,
            )
        assert granted == 1
    
    async def test_empty_caller_is_invalid(self, uow, tree):
        """An empty caller ID is rejected before any lookup."""
        with pytest.raises(InvalidInputError):
            async with uow() as container:
                await container.categories.get(tree["c1"], "")
