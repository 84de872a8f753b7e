"""Custom exception hierarchy for the Budget Planner."""

from __future__ import annotations


class BudgetPlannerError(Exception):
    """Base exception for all Budget Planner errors."""


class QuoteValidationError(BudgetPlannerError):
    """Raised when a payload is malformed outside of model validation."""


class CatalogError(BudgetPlannerError):
    """Raised for an unknown property type or an invalid catalog definition."""


class AuthorizationError(BudgetPlannerError):
    """Raised when an admin-only operation is attempted without the capability."""


class NotFoundError(BudgetPlannerError):
    """Base for lookups that found nothing."""


class BudgetNotFoundError(NotFoundError):
    """Raised when no budget exists for the given id."""

    def __init__(self, budget_id: str) -> None:
        super().__init__(f"Budget not found: {budget_id}")
        self.budget_id = budget_id


class VersionNotFoundError(NotFoundError):
    """Raised when a budget exists but has no such version number."""

    def __init__(self, budget_id: str, version_number: int) -> None:
        super().__init__(
            f"Version {version_number} not found for budget {budget_id}"
        )
        self.budget_id = budget_id
        self.version_number = version_number


class ShortLinkNotFoundError(NotFoundError):
    """Raised when a short link code is unknown."""


class ShortLinkConflictError(BudgetPlannerError):
    """Raised when a requested custom short link code is already in use."""


class RetryableError(BudgetPlannerError):
    """Base for transient failures the caller may retry."""


class VersionConflictError(RetryableError):
    """Raised when a budget was modified between read and save."""
