"""
Category model - ordered child of a portfolio, parent of projects.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from portfolio_manager.kernel.models.base import Base, TimestampMixin, normalize_title

if TYPE_CHECKING:
    from portfolio_manager.kernel.models.portfolio import Portfolio
    from portfolio_manager.kernel.models.project import Project


class Category(Base, TimestampMixin):
    """
    Portfolio category.

    owner_id is a denormalized copy of the portfolio owner, written at
    creation time. Authorization never reads it; it only backs the
    owner-wide listing and is re-validated by the ownership repair pass.
    """
    
    __tablename__ = "categories"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_key: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    portfolio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("portfolios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    # Relationships
    portfolio: Mapped["Portfolio"] = relationship("Portfolio", back_populates="categories")
    projects: Mapped[List["Project"]] = relationship(
        "Project",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    __table_args__ = (
        UniqueConstraint("portfolio_id", "title_key", name="uq_categories_portfolio_title"),
        Index("ix_categories_portfolio_position", "portfolio_id", "position"),
    )
    
    @validates("title")
    def _sync_title_key(self, key: str, value: str) -> str:
        self.title_key = normalize_title(value)
        return value
    
    def __repr__(self) -> str:
        return f"<Category {self.id} {self.title!r} pos={self.position}>"
