"""Budget Planner: tiered technology package quoting with versioned budgets.

Usage::

    from budgetplanner import create_default_engine, SelectionState

    engine = create_default_engine()
    quote = engine.quote(SelectionState(selections={"audio": "best"}, home_size=5200))
"""

from budgetplanner.engine import QuoteEngine
from budgetplanner.factory import (
    create_default_engine,
    create_default_links,
    create_default_service,
)
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
from budgetplanner.pricing import (
    calculate_total,
    category_price,
    dominant_tier,
    extra_price,
    size_multiplier,
)
from budgetplanner.services.budgets import BudgetService
from budgetplanner.services.links import ShortLinkService
from budgetplanner.session import QuoteSession

__all__ = [
    "Budget",
    "BudgetPhase",
    "BudgetService",
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
    "QuoteEngine",
    "QuoteSession",
    "SelectionState",
    "ShortLink",
    "ShortLinkService",
    "Tier",
    "TierOffering",
    "Totals",
    "UpdateResult",
    "Version",
    "VersionAction",
    "calculate_total",
    "category_price",
    "create_default_engine",
    "create_default_links",
    "create_default_service",
    "dominant_tier",
    "extra_price",
    "size_multiplier",
]
