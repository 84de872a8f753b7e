"""Application services around the pricing engine and version policy."""

from budgetplanner.services.budgets import BudgetService, Viewer
from budgetplanner.services.links import ShortLinkService
from budgetplanner.services.proposal import (
    DEFAULT_SUBJECT,
    Proposal,
    build_proposal,
    render_proposal_email,
)

__all__ = [
    "DEFAULT_SUBJECT",
    "BudgetService",
    "Proposal",
    "ShortLinkService",
    "Viewer",
    "build_proposal",
    "render_proposal_email",
]
