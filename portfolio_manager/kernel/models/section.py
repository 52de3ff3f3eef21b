"""
Section model - ordered child of a portfolio, parent of section contents.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from portfolio_manager.kernel.models.base import Base, TimestampMixin, normalize_title

if TYPE_CHECKING:
    from portfolio_manager.kernel.models.portfolio import Portfolio
    from portfolio_manager.kernel.models.section_content import SectionContent


class Section(Base, TimestampMixin):
    """Portfolio section. owner_id is a denormalized copy, see Category."""
    
    __tablename__ = "sections"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_key: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(50), default="text", nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    portfolio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("portfolios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    # Relationships
    portfolio: Mapped["Portfolio"] = relationship("Portfolio", back_populates="sections")
    contents: Mapped[List["SectionContent"]] = relationship(
        "SectionContent",
        back_populates="section",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    __table_args__ = (
        UniqueConstraint("portfolio_id", "title_key", name="uq_sections_portfolio_title"),
        Index("ix_sections_portfolio_position", "portfolio_id", "position"),
    )
    
    @validates("title")
    def _sync_title_key(self, key: str, value: str) -> str:
        self.title_key = normalize_title(value)
        return value
    
    def __repr__(self) -> str:
        return f"<Section {self.id} {self.title!r} pos={self.position}>"
