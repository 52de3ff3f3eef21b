"""
Portfolio model - the root of every owner chain.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from portfolio_manager.kernel.models.base import Base, TimestampMixin, normalize_title

if TYPE_CHECKING:
    from portfolio_manager.kernel.models.user import User
    from portfolio_manager.kernel.models.category import Category
    from portfolio_manager.kernel.models.section import Section


class Portfolio(Base, TimestampMixin):
    """Root owned resource. Title is unique per owner."""
    
    __tablename__ = "portfolios"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_key: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="portfolios")
    categories: Mapped[List["Category"]] = relationship(
        "Category",
        back_populates="portfolio",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sections: Mapped[List["Section"]] = relationship(
        "Section",
        back_populates="portfolio",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    __table_args__ = (
        UniqueConstraint("owner_id", "title_key", name="uq_portfolios_owner_title"),
    )
    
    @validates("title")
    def _sync_title_key(self, key: str, value: str) -> str:
        self.title_key = normalize_title(value)
        return value
    
    def __repr__(self) -> str:
        return f"<Portfolio {self.id} {self.title!r}>"
