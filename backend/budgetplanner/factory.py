"""Factory functions for creating pre-configured engines and services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from budgetplanner.data.repository import CatalogRepository
from budgetplanner.data.seed import SEED_CATALOGS
from budgetplanner.engine import QuoteEngine
from budgetplanner.services.budgets import BudgetService, utcnow
from budgetplanner.services.links import ShortLinkService
from budgetplanner.store import InMemoryBudgetStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime


def create_default_engine() -> QuoteEngine:
    """Create a QuoteEngine wired up with the built-in catalogs.

    This is the recommended way to create a QuoteEngine for typical usage.
    It wires up a CatalogRepository with the residential and condo seed
    catalogs so callers don't need to understand the internal wiring.

    Returns:
        A QuoteEngine ready to price selection states.

    Example::

        from budgetplanner import create_default_engine, SelectionState

        engine = create_default_engine()
        quote = engine.quote(SelectionState(selections={"audio": "best"}))
    """
    return QuoteEngine(CatalogRepository(SEED_CATALOGS))


def create_default_service(
    engine: QuoteEngine | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> BudgetService:
    """Create a BudgetService over a fresh in-memory store."""
    return BudgetService(
        InMemoryBudgetStore(),
        engine or create_default_engine(),
        clock=clock,
    )


def create_default_links(clock: Callable[[], datetime] = utcnow) -> ShortLinkService:
    return ShortLinkService(clock=clock)
