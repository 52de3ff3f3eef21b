"""
Repositories: storage access for users and the owned resource tree.
"""

from portfolio_manager.kernel.repositories.base import ResourceRepository, storage_errors
from portfolio_manager.kernel.repositories.user import UserRepository
from portfolio_manager.kernel.repositories.portfolio import PortfolioRepository
from portfolio_manager.kernel.repositories.category import CategoryRepository
from portfolio_manager.kernel.repositories.section import SectionRepository
from portfolio_manager.kernel.repositories.project import ProjectRepository
from portfolio_manager.kernel.repositories.section_content import SectionContentRepository

__all__ = [
    "ResourceRepository",
    "storage_errors",
    "UserRepository",
    "PortfolioRepository",
    "CategoryRepository",
    "SectionRepository",
    "ProjectRepository",
    "SectionContentRepository",
]
