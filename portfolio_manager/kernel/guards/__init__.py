"""
Write-time guards.
"""

from portfolio_manager.kernel.guards.duplicate_guard import DuplicateGuard

__all__ = ["DuplicateGuard"]
