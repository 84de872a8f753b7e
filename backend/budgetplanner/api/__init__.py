"""HTTP API for the Budget Planner."""

from budgetplanner.api.app import create_app

__all__ = ["create_app"]
