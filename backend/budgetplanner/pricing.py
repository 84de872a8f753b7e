"""Pricing engine: size-scaled category and extra prices, and quote totals.

Prices in the catalog are quoted for a 4000 sqft reference home. A
category's ``size_scale`` is an elasticity around that reference:

1. **Size multiplier** — ``1 + (max(sqft, 2500) / 4000 - 1) * scale``. A scale
   of 0 is size-independent, 1 is fully proportional, and negative values
   scale inversely. The output is not bounded.
2. **Category price** — tier price times the multiplier, rounded to the
   nearest $100. Customized categories return their hand-edited price as-is,
   and ``base_tier_no_scale`` categories keep the good tier at a fixed price.
3. **Totals** — categories (plus their per-category adjustment), extras, and
   free-form modifiers add up to the equipment subtotal; tax is a flat 7%
   estimate rounded to the nearest dollar.

All rounding is half-up, so $50 rounds to $100 and $0.50 to $1.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import TYPE_CHECKING

from budgetplanner.models.enums import Tier
from budgetplanner.models.quote import Totals

if TYPE_CHECKING:
    from collections.abc import Mapping

    from budgetplanner.models.catalog import Category, Extra, PricingCatalog
    from budgetplanner.models.selection import SelectionState

logger = logging.getLogger(__name__)

REFERENCE_SQFT = 4000
MIN_SQFT = 2500
TAX_RATE = 0.07
PRICE_INCREMENT = 100

# Ties go to the higher tier.
_TIE_BREAK_ORDER: tuple[Tier, ...] = (Tier.BEST, Tier.BETTER, Tier.STANDARD, Tier.GOOD)


def round_half_up(value: float, increment: int = 1) -> int:
    """Round ``value`` to the nearest multiple of ``increment``, halves upward."""
    return math.floor(value / increment + 0.5) * increment


def size_multiplier(sqft: float, scale_factor: float) -> float:
    """Price multiplier for a home of ``sqft`` given a category's elasticity."""
    if scale_factor == 0:
        return 1
    ratio = max(sqft, MIN_SQFT) / REFERENCE_SQFT
    return 1 + (ratio - 1) * scale_factor


def _scaled_price(base: float, home_size: float, scale: float) -> int:
    return round_half_up(base * size_multiplier(home_size, scale), PRICE_INCREMENT)


def category_price(
    category: Category, tier: str | None, home_size: float = REFERENCE_SQFT
) -> float:
    """Price of ``tier`` in ``category`` for a home of ``home_size`` sqft.

    Returns 0 when no tier is chosen or the category does not offer it.
    """
    offering = category.offering(tier)
    if offering is None:
        return 0
    if category.is_customized:
        return offering.price
    if category.base_tier_no_scale and tier == Tier.GOOD:
        return round_half_up(offering.price, PRICE_INCREMENT)
    scale = (
        offering.size_scale
        if offering.size_scale is not None
        else category.size_scale
    )
    return _scaled_price(offering.price, home_size, scale)


def extra_price(extra: Extra, home_size: float = REFERENCE_SQFT) -> float:
    """Price of an extra; flat unless the extra declares its own scale."""
    if extra.size_scale is None:
        return extra.price
    return _scaled_price(extra.price, home_size, extra.size_scale)


def calculate_total(catalog: PricingCatalog, selections: SelectionState) -> Totals:
    """Aggregate the quote for ``selections`` against ``catalog``.

    Selection entries naming categories, tiers, or extras the catalog does
    not have are priced at zero rather than rejected.
    """
    home_size = selections.home_size
    subtotal: float = 0
    selected_count = 0

    for cat in catalog.categories:
        tier = selections.selections.get(cat.id)
        if not tier:
            continue
        subtotal += category_price(cat, tier, home_size)
        adjustment = selections.category_adjustments.get(cat.id)
        if adjustment is not None and adjustment.amount:
            subtotal += adjustment.amount
        selected_count += 1

    extras_total: float = 0
    for extra in catalog.extras:
        if selections.extras.get(extra.id):
            extras_total += extra_price(extra, home_size)

    modifiers_total: float = sum(m.amount for m in selections.modifiers)

    equipment_subtotal = subtotal + extras_total + modifiers_total
    tax_estimate = round_half_up(equipment_subtotal * TAX_RATE)
    grand_total = equipment_subtotal + tax_estimate

    logger.debug(
        "Priced %d categories for %d sqft: equipment=%s tax=%s total=%s",
        selected_count,
        home_size,
        equipment_subtotal,
        tax_estimate,
        grand_total,
    )

    return Totals(
        subtotal=subtotal,
        extras_total=extras_total,
        modifiers_total=modifiers_total,
        equipment_subtotal=equipment_subtotal,
        tax_estimate=tax_estimate,
        grand_total=grand_total,
        selected_count=selected_count,
    )


def dominant_tier(selections: Mapping[str, str | None]) -> str:
    """Display label of the most frequently selected tier.

    Returns ``""`` when nothing is selected. On a tie the higher tier wins
    (best > better > standard > good). Unknown tier names are ignored.
    """
    known = {t.value for t in Tier}
    counts = Counter(t for t in selections.values() if t in known)
    if not counts:
        return ""
    best_count = max(counts.values())
    winner = next(t for t in _TIE_BREAK_ORDER if counts.get(t.value) == best_count)
    return winner.label
