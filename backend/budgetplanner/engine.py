"""Quote engine: binds the pricing functions to the active catalogs.

The engine turns a ``SelectionState`` into a ``Quote``:

1. **Catalog lookup** — the active catalog for the state's property type, or
   an explicit catalog (a budget's customized pricing).
2. **Line items** — each selected category and enabled extra priced with the
   home-size scaling rules in ``budgetplanner.pricing``.
3. **Totals** — the aggregate from ``calculate_total``, so the line items and
   totals can never disagree.
4. **Tier label** — the dominant tier across the selections.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from budgetplanner.models.enums import Tier
from budgetplanner.models.quote import ExtraLine, LineItem, Quote
from budgetplanner.pricing import (
    calculate_total,
    category_price,
    dominant_tier,
    extra_price,
)

if TYPE_CHECKING:
    from budgetplanner.data.repository import CatalogRepository
    from budgetplanner.models.catalog import PricingCatalog
    from budgetplanner.models.enums import PropertyType
    from budgetplanner.models.selection import SelectionState

logger = logging.getLogger(__name__)


class QuoteEngine:
    """Prices selection states against the repository's catalogs.

    Args:
        repository: Source of the active catalog per property type.

    Example::

        from budgetplanner import create_default_engine, SelectionState

        engine = create_default_engine()
        quote = engine.quote(SelectionState(selections={"networking": "good"}))
    """

    def __init__(self, repository: CatalogRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> CatalogRepository:
        return self._repository

    def catalog_for(self, property_type: PropertyType | str) -> PricingCatalog:
        return self._repository.get_catalog(property_type)

    def quote(
        self,
        state: SelectionState,
        catalog: PricingCatalog | None = None,
    ) -> Quote:
        """Price ``state``.

        Args:
            state: The selections to price.
            catalog: Optional catalog to price against instead of the default
                for ``state.property_type``.

        Raises:
            CatalogError: If no catalog exists for the state's property type.
        """
        if catalog is None:
            catalog = self.catalog_for(state.property_type)
        home_size = state.home_size

        line_items: list[LineItem] = []
        for cat in catalog.categories:
            tier = state.selections.get(cat.id)
            if not tier:
                continue
            offering = cat.offering(tier)
            adjustment = state.category_adjustments.get(cat.id)
            line_items.append(
                LineItem(
                    category_id=cat.id,
                    name=cat.name,
                    section=cat.section,
                    tier=tier,
                    tier_label=offering.label if offering else "",
                    price=category_price(cat, tier, home_size),
                    adjustment=adjustment.amount if adjustment else 0,
                    adjustment_name=adjustment.name if adjustment else "",
                )
            )

        extra_items = [
            ExtraLine(extra_id=e.id, name=e.name, price=extra_price(e, home_size))
            for e in catalog.extras
            if state.extras.get(e.id)
        ]

        totals = calculate_total(catalog, state)
        known_ids = set(catalog.category_ids)
        tier_label = dominant_tier(
            {cid: t for cid, t in state.selections.items() if cid in known_ids}
        )

        unknown = [
            cid
            for cid, t in state.chosen().items()
            if cid not in known_ids or t not in {x.value for x in Tier}
        ]
        if unknown:
            logger.debug("Priced unknown selections at zero: %s", ", ".join(unknown))

        return Quote(
            property_type=catalog.property_type,
            home_size=home_size,
            line_items=line_items,
            extra_items=extra_items,
            modifiers=list(state.modifiers),
            totals=totals,
            tier_label=tier_label,
        )
