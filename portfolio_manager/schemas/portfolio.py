"""
Portfolio schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PortfolioCreate(BaseModel):
    """Portfolio creation request. owner_id is the calling user."""
    
    owner_id: str = ""
    title: str = ""
    description: Optional[str] = None


class PortfolioUpdate(BaseModel):
    """Portfolio update request. Fields left as None are unchanged."""
    
    id: int = 0
    owner_id: str = ""
    title: Optional[str] = None
    description: Optional[str] = None


class PortfolioResponse(BaseModel):
    """Portfolio response."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    title: str
    description: Optional[str]
    owner_id: str
    created_at: datetime
    updated_at: datetime
