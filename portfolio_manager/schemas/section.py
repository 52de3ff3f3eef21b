"""
Section schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SectionCreate(BaseModel):
    """Section creation request."""
    
    owner_id: str = ""
    portfolio_id: int = 0
    title: str = ""
    description: Optional[str] = None
    type: str = "text"
    position: int = 0


class SectionUpdate(BaseModel):
    """Section update request. Fields left as None are unchanged."""
    
    id: int = 0
    owner_id: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    position: Optional[int] = None


class SectionResponse(BaseModel):
    """Section response."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    title: str
    description: Optional[str]
    type: str
    position: int
    owner_id: str
    portfolio_id: int
    created_at: datetime
    updated_at: datetime
