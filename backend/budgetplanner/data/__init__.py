"""Catalog data layer for the Budget Planner."""

from budgetplanner.data.repository import CatalogRepository
from budgetplanner.data.seed import SEED_CATALOGS

__all__ = [
    "SEED_CATALOGS",
    "CatalogRepository",
]
