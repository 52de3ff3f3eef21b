"""
User schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ExternalIdentity(BaseModel):
    """Claims of an already-authenticated caller, as handed over by the boundary."""
    
    external_id: str = ""
    email: str = ""
    name: str = ""


class UserUpdate(BaseModel):
    """Current-user update request. Only the display name is editable."""
    
    name: str = ""


class UserResponse(BaseModel):
    """User response."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    email: str
    name: str
    external_id: Optional[str]
    created_at: datetime
    updated_at: datetime
