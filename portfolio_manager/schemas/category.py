"""
Category schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class CategoryCreate(BaseModel):
    """Category creation request."""
    
    owner_id: str = ""
    portfolio_id: int = 0
    title: str = ""
    description: Optional[str] = None
    position: int = 0


class CategoryUpdate(BaseModel):
    """Category update request. Fields left as None are unchanged."""
    
    id: int = 0
    owner_id: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    position: Optional[int] = None


class CategoryResponse(BaseModel):
    """Category response."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    title: str
    description: Optional[str]
    position: int
    owner_id: str
    portfolio_id: int
    created_at: datetime
    updated_at: datetime
