"""
Section content model - ordered blocks inside a section.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_manager.kernel.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from portfolio_manager.kernel.models.section import Section


class ContentType(str, Enum):
    """Kinds of section content."""
    TEXT = "text"
    IMAGE = "image"


class SectionContent(Base, TimestampMixin):
    """Content block. Sibling order lives in `order`, not `position`."""
    
    __tablename__ = "section_contents"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    section_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    image_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    
    # Relationships
    section: Mapped["Section"] = relationship("Section", back_populates="contents")
    
    __table_args__ = (
        Index("ix_section_contents_section_order", "section_id", "order"),
    )
    
    def __repr__(self) -> str:
        return f"<SectionContent {self.id} {self.type} order={self.order}>"
