"""Domain models for the Budget Planner."""

from budgetplanner.models.budget import (
    Budget,
    BudgetSummary,
    BudgetView,
    ShortLink,
    UpdateResult,
    Version,
)
from budgetplanner.models.catalog import Category, Extra, PricingCatalog, TierOffering
from budgetplanner.models.enums import BudgetPhase, PropertyType, Tier, VersionAction
from budgetplanner.models.quote import ExtraLine, LineItem, Quote, Totals
from budgetplanner.models.selection import CategoryAdjustment, Modifier, SelectionState

__all__ = [
    "Budget",
    "BudgetPhase",
    "BudgetSummary",
    "BudgetView",
    "Category",
    "CategoryAdjustment",
    "Extra",
    "ExtraLine",
    "LineItem",
    "Modifier",
    "PricingCatalog",
    "PropertyType",
    "Quote",
    "SelectionState",
    "ShortLink",
    "Tier",
    "TierOffering",
    "Totals",
    "UpdateResult",
    "Version",
    "VersionAction",
]
