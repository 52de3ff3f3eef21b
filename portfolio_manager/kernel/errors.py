"""
Error taxonomy for the portfolio core.

Every failure a caller can observe is one of five kinds. The boundary
(HTTP controller, CLI, job) maps kinds to its own transport; the core
never encodes transport concerns.
"""

from typing import Any, Dict, Optional


class PortfolioManagerError(Exception):
    """
    Base exception for the portfolio core.

    Carries the entity and operation that failed so messages stay
    actionable after several layers of wrapping.
    """

    code = "PORTFOLIO_MANAGER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        entity: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.operation = operation
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Transport-neutral representation of the error."""
        result: Dict[str, Any] = {
            "detail": self.message,
            "code": self.code,
        }
        if self.entity:
            result["entity"] = self.entity
        if self.operation:
            result["operation"] = self.operation
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        if self.entity and self.operation:
            return f"{self.operation} {self.entity}: {self.message}"
        return self.message


class InvalidInputError(PortfolioManagerError):
    """Malformed or missing required field."""

    code = "INVALID_INPUT"


class NotFoundError(PortfolioManagerError):
    """Resource, or an ancestor in its owner chain, does not exist."""

    code = "NOT_FOUND"


class UnauthorizedError(PortfolioManagerError):
    """Resolved owner differs from the caller."""

    code = "UNAUTHORIZED"


class ConflictError(PortfolioManagerError):
    """Sibling title already taken."""

    code = "CONFLICT"


class InternalError(PortfolioManagerError):
    """Storage failure."""

    code = "INTERNAL"


def require_id(value: Optional[int], field: str, *, entity: str, operation: str) -> int:
    """Reject the zero/None sentinel where a positive ID is required."""
    if value is None or value <= 0:
        raise InvalidInputError(
            f"{field} is required",
            entity=entity,
            operation=operation,
            details={"field": field},
        )
    return value


def require_text(value: Optional[str], field: str, *, entity: str, operation: str) -> str:
    """Reject empty or whitespace-only required strings."""
    if value is None or not value.strip():
        raise InvalidInputError(
            f"{field} is required",
            entity=entity,
            operation=operation,
            details={"field": field},
        )
    return value
