"""
Use cases for users and the owned resource tree.
"""

from portfolio_manager.services.base import (
    ChildResourceService,
    OrderedResourceService,
    OwnedResourceService,
)
from portfolio_manager.services.user_service import UserService
from portfolio_manager.services.portfolio_service import PortfolioService
from portfolio_manager.services.category_service import CategoryService
from portfolio_manager.services.section_service import SectionService
from portfolio_manager.services.project_service import ProjectService
from portfolio_manager.services.section_content_service import SectionContentService

__all__ = [
    "OwnedResourceService",
    "ChildResourceService",
    "OrderedResourceService",
    "UserService",
    "PortfolioService",
    "CategoryService",
    "SectionService",
    "ProjectService",
    "SectionContentService",
]
