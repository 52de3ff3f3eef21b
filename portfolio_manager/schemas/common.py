"""
Common schema types shared by every use case.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio_manager.config import get_settings

T = TypeVar("T")


class Pagination(BaseModel):
    """
    Page request for owner-wide listings.

    Out-of-range values fall back to defaults rather than failing:
    page < 1 becomes 1, and a limit outside 1..max_page_size becomes
    default_page_size. Pagination() is therefore page 1 of 10.
    """

    model_config = ConfigDict(validate_default=True)

    page: int = 0
    limit: int = 0

    @field_validator("page", mode="before")
    @classmethod
    def _default_page(cls, value: Optional[int]) -> int:
        if value is None or int(value) < 1:
            return 1
        return int(value)

    @field_validator("limit", mode="before")
    @classmethod
    def _default_limit(cls, value: Optional[int]) -> int:
        settings = get_settings()
        if value is None or not 1 <= int(value) <= settings.max_page_size:
            return settings.default_page_size
        return int(value)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated list response."""

    items: List[T]
    total: int
    page: int = 1
    limit: int = 10
    has_more: bool = False

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        pagination: Pagination,
    ) -> "PaginatedResponse[T]":
        return cls(
            items=items,
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            has_more=(pagination.page * pagination.limit) < total,
        )


class PositionUpdate(BaseModel):
    """One (id, position) pair of a bulk reorder."""

    id: int
    position: int


class ErrorResponse(BaseModel):
    """Transport-neutral error payload, see PortfolioManagerError.to_dict()."""

    detail: str
    code: str
    entity: Optional[str] = None
    operation: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
