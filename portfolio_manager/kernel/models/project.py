"""
Project model - showcased work, child of a category.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_manager.kernel.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from portfolio_manager.kernel.models.category import Category


class Project(Base, TimestampMixin):
    """Project with media, skill and client metadata."""
    
    __tablename__ = "projects"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    main_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    images: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    skills: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    client: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    link: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    # Relationships
    category: Mapped["Category"] = relationship("Category", back_populates="projects")
    
    def __repr__(self) -> str:
        return f"<Project {self.id} {self.title!r}>"
