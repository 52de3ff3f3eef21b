"""
Explicit wiring for one unit of work.

Usage:
    await startup()
    async with session_scope() as session:
        container = Container(session, metrics=app_metrics)
        category = await container.categories.create(data)
"""

from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_manager.kernel.events import AuditRecorder, EventStore
from portfolio_manager.kernel.guards import DuplicateGuard
from portfolio_manager.kernel.metrics import MetricsCollector, MetricsRecorder
from portfolio_manager.kernel.ordering import PositionManager
from portfolio_manager.kernel.permissions import AuthorizationGate, OwnershipResolver, ResourceType
from portfolio_manager.kernel.repositories import (
    CategoryRepository,
    PortfolioRepository,
    ProjectRepository,
    ResourceRepository,
    SectionContentRepository,
    SectionRepository,
    UserRepository,
)
from portfolio_manager.services import (
    CategoryService,
    PortfolioService,
    ProjectService,
    SectionContentService,
    SectionService,
    UserService,
)


class Container:
    """Builds repositories, kernel components and services around one session."""

    def __init__(
        self,
        session: AsyncSession,
        audit: Optional[AuditRecorder] = None,
        metrics: Optional[MetricsRecorder] = None,
    ):
        self.session = session
        self.audit = audit if audit is not None else EventStore(session)
        self.metrics = metrics if metrics is not None else MetricsCollector()

        self.repositories: Dict[ResourceType, ResourceRepository] = {
            ResourceType.PORTFOLIO: PortfolioRepository(session),
            ResourceType.CATEGORY: CategoryRepository(session),
            ResourceType.SECTION: SectionRepository(session),
            ResourceType.PROJECT: ProjectRepository(session),
            ResourceType.SECTION_CONTENT: SectionContentRepository(session),
        }
        self.user_repository = UserRepository(session)

        self.resolver = OwnershipResolver(self.repositories)
        self.gate = AuthorizationGate(self.resolver, self.audit, self.metrics)
        self.guard = DuplicateGuard(self.repositories)
        self.positions = PositionManager(self.repositories, self.gate, self.audit, self.metrics)

        self.users = UserService(self.user_repository, self.audit, self.metrics)
        self.portfolios = PortfolioService(*self._service_args(ResourceType.PORTFOLIO))
        self.categories = CategoryService(*self._service_args(ResourceType.CATEGORY))
        self.sections = SectionService(*self._service_args(ResourceType.SECTION))
        self.projects = ProjectService(*self._service_args(ResourceType.PROJECT))
        self.section_contents = SectionContentService(*self._service_args(ResourceType.SECTION_CONTENT))

    def _service_args(self, resource_type: ResourceType) -> tuple:
        return (
            self.repositories[resource_type],
            self.resolver,
            self.gate,
            self.guard,
            self.positions,
            self.audit,
            self.metrics,
        )
