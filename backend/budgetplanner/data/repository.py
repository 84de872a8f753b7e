"""Catalog repository: the active pricing catalog per property type."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from pydantic import ValidationError

from budgetplanner.exceptions import CatalogError
from budgetplanner.models.catalog import Category, Extra, PricingCatalog
from budgetplanner.models.enums import PropertyType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Holds the default catalog for each property type.

    The defaults are admin-editable; callers always receive copies so a
    catalog handed to the pricing engine cannot be mutated underneath it.
    """

    def __init__(self, catalogs: Mapping[PropertyType, PricingCatalog]) -> None:
        self._catalogs = {pt: c.model_copy(deep=True) for pt, c in catalogs.items()}
        self._lock = threading.Lock()

    def property_types(self) -> list[PropertyType]:
        return list(self._catalogs)

    def get_catalog(self, property_type: PropertyType | str) -> PricingCatalog:
        """Return a copy of the active catalog for ``property_type``.

        Raises:
            CatalogError: If the property type is unknown or has no catalog.
        """
        try:
            key = PropertyType(property_type)
        except ValueError as exc:
            msg = f"Unknown property type: {property_type!r}"
            raise CatalogError(msg) from exc
        with self._lock:
            catalog = self._catalogs.get(key)
        if catalog is None:
            msg = f"No catalog configured for {key.value}"
            raise CatalogError(msg)
        return catalog.model_copy(deep=True)

    def set_defaults(
        self,
        property_type: PropertyType | str,
        categories: Iterable[Category | dict[str, object]],
        extras: Iterable[Extra | dict[str, object]] = (),
    ) -> PricingCatalog:
        """Replace the default catalog for ``property_type``.

        Raw dicts are validated here, once, so a bad edit is rejected before
        it can reach any quote.

        Raises:
            CatalogError: If the property type is unknown or the definition
                does not validate.
        """
        try:
            key = PropertyType(property_type)
            catalog = PricingCatalog(
                property_type=key,
                categories=[
                    c if isinstance(c, Category) else Category.model_validate(c)
                    for c in categories
                ],
                extras=[
                    e if isinstance(e, Extra) else Extra.model_validate(e)
                    for e in extras
                ],
            )
        except (ValueError, ValidationError) as exc:
            msg = f"Invalid catalog for {property_type!r}: {exc}"
            raise CatalogError(msg) from exc

        with self._lock:
            self._catalogs[key] = catalog
        logger.info(
            "Catalog defaults updated for %s: %d categories, %d extras",
            key.value,
            len(catalog.categories),
            len(catalog.extras),
        )
        return catalog.model_copy(deep=True)
