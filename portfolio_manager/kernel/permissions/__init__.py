"""
Ownership and authorization.
"""

from portfolio_manager.kernel.permissions.ownership import (
    PARENT_LINKS,
    OwnerChain,
    OwnershipResolver,
    ParentLink,
    ResourceType,
)
from portfolio_manager.kernel.permissions.gate import AuthorizationGate

__all__ = [
    "PARENT_LINKS",
    "OwnerChain",
    "OwnershipResolver",
    "ParentLink",
    "ResourceType",
    "AuthorizationGate",
]
