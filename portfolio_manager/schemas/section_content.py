"""
Section content schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SectionContentCreate(BaseModel):
    """Section content creation request. type is "text" or "image"."""
    
    owner_id: str = ""
    section_id: int = 0
    type: str = ""
    content: Optional[str] = None
    order: int = 0
    image_id: Optional[int] = None


class SectionContentUpdate(BaseModel):
    """Section content update request. Fields left as None are unchanged."""
    
    id: int = 0
    owner_id: str = ""
    type: Optional[str] = None
    content: Optional[str] = None
    order: Optional[int] = None
    image_id: Optional[int] = None


class SectionContentResponse(BaseModel):
    """Section content response."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    section_id: int
    type: str
    content: Optional[str]
    order: int
    image_id: Optional[int]
    owner_id: str
    created_at: datetime
    updated_at: datetime
