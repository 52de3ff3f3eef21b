"""
Sibling ordering.
"""

from portfolio_manager.kernel.ordering.position_manager import PositionManager

__all__ = ["PositionManager"]
