"""
Kernel Data Models

SQLAlchemy models for the owned resource tree:
User -> Portfolio -> {Category -> Project, Section -> SectionContent}
"""

from portfolio_manager.kernel.models.base import Base, TimestampMixin, generate_uuid, normalize_title
from portfolio_manager.kernel.models.user import User
from portfolio_manager.kernel.models.portfolio import Portfolio
from portfolio_manager.kernel.models.category import Category
from portfolio_manager.kernel.models.section import Section
from portfolio_manager.kernel.models.project import Project
from portfolio_manager.kernel.models.section_content import SectionContent, ContentType
from portfolio_manager.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "normalize_title",
    # Resource tree
    "User",
    "Portfolio",
    "Category",
    "Section",
    "Project",
    "SectionContent",
    "ContentType",
    # Event Log
    "EventLog",
    "EventType",
]
