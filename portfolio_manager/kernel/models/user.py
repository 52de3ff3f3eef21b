"""
User model for identity management.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_manager.kernel.models.base import Base, TimestampMixin, generate_uuid

if TYPE_CHECKING:
    from portfolio_manager.kernel.models.portfolio import Portfolio


class User(Base, TimestampMixin):
    """
    User account, anchored on the external identity provider.

    Created on the first successful external authentication and refreshed
    on later logins and profile edits.
    """
    
    __tablename__ = "users"
    
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        default="",
        nullable=False,
    )
    external_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=True,
    )
    
    # Relationships
    portfolios: Mapped[List["Portfolio"]] = relationship(
        "Portfolio",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    def __repr__(self) -> str:
        return f"<User {self.email}>"
