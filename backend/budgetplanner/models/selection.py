"""Selection state: the caller-owned input to the pricing engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator

from budgetplanner.models.base import WireModel
from budgetplanner.models.enums import PropertyType

if TYPE_CHECKING:
    from budgetplanner.models.catalog import PricingCatalog

_NO_SELECTION = {"", "none"}


class Modifier(WireModel):
    """A free-form signed dollar adjustment (credit or surcharge)."""

    name: str = ""
    amount: float = 0.0


class CategoryAdjustment(WireModel):
    """A signed dollar adjustment attached to a single category."""

    name: str = ""
    amount: float = 0.0


class SelectionState(WireModel):
    """Tier choices, extras, and adjustments for one quote.

    Entries referring to categories, tiers, or extras the active catalog
    does not know are kept as-is; the pricing engine prices them at zero so
    that budgets saved against an older catalog still load.
    """

    selections: dict[str, str | None] = Field(default_factory=dict)
    extras: dict[str, bool] = Field(default_factory=dict)
    modifiers: list[Modifier] = Field(default_factory=list)
    category_adjustments: dict[str, CategoryAdjustment] = Field(
        default_factory=dict, alias="catMods"
    )
    home_size: int = Field(default=4000, gt=0)
    property_type: PropertyType = PropertyType.RESIDENTIAL

    @field_validator("selections", mode="before")
    @classmethod
    def normalise_empty_selections(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {
            key: (None if tier is None or str(tier).lower() in _NO_SELECTION else tier)
            for key, tier in v.items()
        }

    @field_validator("category_adjustments", mode="before")
    @classmethod
    def drop_null_adjustments(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {key: mod for key, mod in v.items() if mod is not None}

    def chosen(self) -> dict[str, str]:
        """Category id -> tier for every category with an actual selection."""
        return {cid: tier for cid, tier in self.selections.items() if tier}

    def for_catalog(self, catalog: PricingCatalog) -> SelectionState:
        """Return a copy with an entry for every category and extra in ``catalog``.

        Existing entries win; new categories start unselected with an empty
        adjustment and new extras start at their catalog default.
        """
        selections = dict(self.selections)
        adjustments = dict(self.category_adjustments)
        extras = dict(self.extras)
        for cat in catalog.categories:
            selections.setdefault(cat.id, None)
            adjustments.setdefault(cat.id, CategoryAdjustment())
        for extra in catalog.extras:
            extras.setdefault(extra.id, extra.default)
        return self.model_copy(
            update={
                "selections": selections,
                "category_adjustments": adjustments,
                "extras": extras,
            },
            deep=True,
        )
