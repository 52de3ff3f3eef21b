"""
Project schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    """Project creation request."""
    
    owner_id: str = ""
    category_id: int = 0
    title: str = ""
    description: str = ""
    main_image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    client: Optional[str] = None
    link: Optional[str] = None


class ProjectUpdate(BaseModel):
    """Project update request. Fields left as None are unchanged."""
    
    id: int = 0
    owner_id: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    main_image: Optional[str] = None
    images: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    client: Optional[str] = None
    link: Optional[str] = None


class ProjectResponse(BaseModel):
    """Project response."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    title: str
    description: str
    main_image: Optional[str]
    images: List[str]
    skills: List[str]
    client: Optional[str]
    link: Optional[str]
    owner_id: str
    category_id: int
    created_at: datetime
    updated_at: datetime
