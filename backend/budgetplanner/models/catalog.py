"""Pricing catalog models: categories, tier offerings, and extras.

The catalog is validated once when it is loaded, so the pricing functions
can rely on the optional scaling fields being well-typed.
"""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator

from budgetplanner.models.base import WireModel
from budgetplanner.models.enums import PropertyType, Tier


class TierOffering(WireModel):
    """One tier of a category, priced at the 4000 sqft reference size."""

    price: float = Field(ge=0)
    size_scale: float | None = None
    label: str = ""
    tag: str = ""
    features: list[str] = Field(default_factory=list)
    brands: str = ""


class Category(WireModel):
    """A priced technology subsystem offered in several tiers."""

    id: str = Field(min_length=1)
    name: str
    section: str = ""
    icon: str = ""
    description: str = Field(default="", alias="desc")
    size_scale: float = 0.0
    base_tier_no_scale: bool = False
    is_customized: bool = False
    tiers: dict[Tier, TierOffering]

    @field_validator("tiers")
    @classmethod
    def tiers_must_not_be_empty(
        cls, v: dict[Tier, TierOffering]
    ) -> dict[Tier, TierOffering]:
        if not v:
            msg = "a category must offer at least one tier"
            raise ValueError(msg)
        return v

    def offering(self, tier: str | None) -> TierOffering | None:
        """Return the offering for ``tier``, or None if it is not offered."""
        if not tier:
            return None
        return self.tiers.get(tier)  # type: ignore[call-overload]


class Extra(WireModel):
    """An optional on/off add-on, flat-priced unless it declares a scale."""

    id: str = Field(min_length=1)
    name: str
    note: str = ""
    price: float = Field(ge=0)
    size_scale: float | None = None
    default: bool = False


class PricingCatalog(WireModel):
    """Categories and extras active for one property type."""

    property_type: PropertyType
    categories: list[Category] = Field(default_factory=list)
    extras: list[Extra] = Field(default_factory=list)

    @model_validator(mode="after")
    def ids_must_be_unique(self) -> PricingCatalog:
        for kind, ids in (
            ("category", [c.id for c in self.categories]),
            ("extra", [e.id for e in self.extras]),
        ):
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            if dupes:
                msg = f"duplicate {kind} ids: {', '.join(dupes)}"
                raise ValueError(msg)
        return self

    def category(self, category_id: str) -> Category | None:
        return next((c for c in self.categories if c.id == category_id), None)

    def extra(self, extra_id: str) -> Extra | None:
        return next((e for e in self.extras if e.id == extra_id), None)

    @property
    def category_ids(self) -> list[str]:
        return [c.id for c in self.categories]
