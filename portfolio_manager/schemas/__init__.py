"""
Pydantic schemas for use-case inputs and outputs.
"""

from portfolio_manager.schemas.common import (
    ErrorResponse,
    PaginatedResponse,
    Pagination,
    PositionUpdate,
)
from portfolio_manager.schemas.user import ExternalIdentity, UserUpdate, UserResponse
from portfolio_manager.schemas.portfolio import PortfolioCreate, PortfolioUpdate, PortfolioResponse
from portfolio_manager.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from portfolio_manager.schemas.section import SectionCreate, SectionUpdate, SectionResponse
from portfolio_manager.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse
from portfolio_manager.schemas.section_content import (
    SectionContentCreate,
    SectionContentUpdate,
    SectionContentResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "PaginatedResponse",
    "Pagination",
    "PositionUpdate",
    # Users
    "ExternalIdentity",
    "UserUpdate",
    "UserResponse",
    # Resources
    "PortfolioCreate",
    "PortfolioUpdate",
    "PortfolioResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "SectionCreate",
    "SectionUpdate",
    "SectionResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "SectionContentCreate",
    "SectionContentUpdate",
    "SectionContentResponse",
]
