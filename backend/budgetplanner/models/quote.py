"""Quote output models for the pricing engine."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from budgetplanner.models.base import WireModel
from budgetplanner.models.enums import PropertyType
from budgetplanner.models.selection import Modifier


class Totals(WireModel):
    """Aggregate figures for a selection, in whole dollars.

    Totals are not floored: modifiers may be credits large enough to make
    ``grand_total`` negative.
    """

    subtotal: float = 0
    extras_total: float = 0
    modifiers_total: float = 0
    equipment_subtotal: float = 0
    tax_estimate: float = 0
    grand_total: float = 0
    selected_count: int = 0


class LineItem(WireModel):
    """A priced category selection."""

    category_id: str
    name: str
    section: str = ""
    tier: str
    tier_label: str = ""
    price: float
    adjustment: float = 0
    adjustment_name: str = ""

    @property
    def total(self) -> float:
        return self.price + self.adjustment


class ExtraLine(WireModel):
    """A priced extra that is toggled on."""

    extra_id: str
    name: str
    price: float


class Quote(WireModel):
    """A fully priced selection state."""

    property_type: PropertyType
    home_size: int
    line_items: list[LineItem] = Field(default_factory=list)
    extra_items: list[ExtraLine] = Field(default_factory=list)
    modifiers: list[Modifier] = Field(default_factory=list)
    totals: Totals
    tier_label: str = ""
    generated_at: datetime = Field(default_factory=datetime.now)

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat summary dict of display strings."""
        from budgetplanner.formatting import format_currency

        return {
            "property_type": self.property_type.value,
            "home_size_formatted": f"{self.home_size:,} sq ft",
            "tier_label": self.tier_label,
            "selected_count": self.totals.selected_count,
            "subtotal_formatted": format_currency(self.totals.subtotal),
            "extras_formatted": format_currency(self.totals.extras_total),
            "modifiers_formatted": format_currency(self.totals.modifiers_total),
            "tax_formatted": format_currency(self.totals.tax_estimate),
            "grand_total_formatted": format_currency(self.totals.grand_total),
            "generated_at_formatted": self.generated_at.strftime("%Y-%m-%d %H:%M"),
        }

    def to_proposal_rows(self) -> list[dict[str, Any]]:
        """Rows for the proposal email table: category, tier, estimate."""
        return [
            {"name": item.name, "tier": item.tier, "price": item.total}
            for item in self.line_items
        ]
