"""Enums for the Budget Planner domain models."""

from enum import StrEnum


class PropertyType(StrEnum):
    """Kind of property a budget is quoted for; selects the catalog."""

    RESIDENTIAL = "residential"
    CONDO = "condo"


class Tier(StrEnum):
    """Quality/price level offered per category, cheapest first."""

    GOOD = "good"
    STANDARD = "standard"
    BETTER = "better"
    BEST = "best"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Tier"


class VersionAction(StrEnum):
    """Outcome of applying a save to a budget's version history."""

    NO_OP = "no_op"
    PINNED = "pinned"
    OVERWRITE = "overwrite"
    APPEND = "append"


class BudgetPhase(StrEnum):
    """Where a budget's latest version sits in the consolidation lifecycle."""

    NO_HISTORY = "no_history"
    FRESH = "fresh"
    STALE = "stale"
    LOCKED = "locked"
