"""Budget service: create, save, restore, customize, and list live budgets.

Each save runs the version policy in ``budgetplanner.versioning`` against a
fresh copy of the budget and commits it with a compare-and-swap on the
budget's revision counter. A concurrent writer makes the commit fail with
``VersionConflictError``; the save is then re-read and re-decided, up to
``MAX_SAVE_ATTEMPTS`` times.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from budgetplanner.exceptions import (
    AuthorizationError,
    CatalogError,
    QuoteValidationError,
    VersionConflictError,
)
from budgetplanner.models.budget import Budget, BudgetView, UpdateResult, Version
from budgetplanner.models.catalog import Category, PricingCatalog
from budgetplanner.models.enums import PropertyType, VersionAction
from budgetplanner.models.selection import SelectionState
from budgetplanner.sharing import generate_code
from budgetplanner.versioning import (
    INITIAL_NOTE,
    apply_update,
    reset_history,
    restore_version,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from budgetplanner.engine import QuoteEngine
    from budgetplanner.models.budget import BudgetSummary
    from budgetplanner.models.quote import Quote
    from budgetplanner.store import InMemoryBudgetStore

logger = logging.getLogger(__name__)

MAX_SAVE_ATTEMPTS = 3
BUDGET_ID_LENGTH = 8
CUSTOMIZED_NOTE = "Customized pricing"

# Keys of a stored state that are not part of the selection itself.
_STATE_META_KEYS = ("clientName", "builder", "total")


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Viewer:
    """Who opened a budget link, for the view log."""

    ip_address: str | None = None
    user_agent: str | None = None


def _parse_state(state: SelectionState | dict[str, Any]) -> SelectionState:
    if isinstance(state, SelectionState):
        return state
    if not isinstance(state, dict):
        msg = "Budget state must be an object"
        raise QuoteValidationError(msg)
    payload = {k: v for k, v in state.items() if k not in _STATE_META_KEYS}
    try:
        return SelectionState.model_validate(payload)
    except ValidationError as exc:
        msg = f"Invalid budget state: {exc}"
        raise QuoteValidationError(msg) from exc


def _state_text(state: SelectionState | dict[str, Any], key: str) -> str | None:
    """Read an optional string field such as ``clientName`` from a raw state."""
    if not isinstance(state, dict):
        return None
    value = state.get(key)
    if value is not None and not isinstance(value, str):
        msg = f"Budget state field {key!r} must be a string"
        raise QuoteValidationError(msg)
    return value or None


class BudgetService:
    """Live budgets backed by a store and priced by a ``QuoteEngine``.

    Args:
        store: Budget persistence.
        engine: Prices states so every stored state carries its ``total``.
        clock: Returns the current time; injectable for tests.
    """

    def __init__(
        self,
        store: InMemoryBudgetStore,
        engine: QuoteEngine,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._engine = engine
        self._clock = clock

    @property
    def engine(self) -> QuoteEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Pricing helpers
    # ------------------------------------------------------------------

    def _apply_locks(self, budget: Budget, state: SelectionState) -> SelectionState:
        update: dict[str, Any] = {}
        if budget.sqft_locked is not None:
            update["home_size"] = budget.sqft_locked
        if budget.property_type_locked is not None:
            update["property_type"] = budget.property_type_locked
        return state.model_copy(update=update) if update else state

    def _snapshot(
        self,
        state: SelectionState,
        catalog: PricingCatalog | None = None,
        client_name: str | None = None,
        builder: str | None = None,
    ) -> dict[str, Any]:
        snapshot = state.to_wire()
        snapshot["total"] = self._engine.quote(state, catalog).totals.grand_total
        if client_name:
            snapshot["clientName"] = client_name
        if builder:
            snapshot["builder"] = builder
        return snapshot

    def quote_for(self, budget: Budget) -> Quote:
        """Price a budget's current state, honouring its customized catalog."""
        state = self._apply_locks(budget, _parse_state(budget.current_state))
        return self._engine.quote(state, budget.custom_catalog)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(
        self,
        state: SelectionState | dict[str, Any],
        client_name: str | None = None,
        builder: str | None = None,
    ) -> Budget:
        """Create a budget with a pinned initial version.

        Raises:
            QuoteValidationError: If ``state`` does not validate.
            CatalogError: If the state's property type has no catalog.
        """
        selection = _parse_state(state)
        client_name = client_name or _state_text(state, "clientName")
        builder = builder or _state_text(state, "builder")
        snapshot = self._snapshot(selection, client_name=client_name, builder=builder)
        now = self._clock()

        budget = Budget(
            id=generate_code(BUDGET_ID_LENGTH),
            client_name=client_name or None,
            builder=builder or None,
            created=now,
            last_modified=now,
            current_state=snapshot,
            versions=[
                Version(
                    version_number=1,
                    timestamp=now,
                    state=snapshot,
                    note=INITIAL_NOTE,
                    pinned=True,
                )
            ],
            version_sequence=1,
        )
        for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
            try:
                self._store.insert(budget)
                break
            except VersionConflictError:
                # Id already taken, possibly by a concurrent create.
                if attempt == MAX_SAVE_ATTEMPTS:
                    raise
                budget.id = generate_code(BUDGET_ID_LENGTH)
        logger.info("Created budget %s for %s", budget.id, client_name or "(no client)")
        return budget.model_copy(deep=True)

    def get(self, budget_id: str, viewer: Viewer | None = None) -> Budget:
        """Load a budget, logging a view when ``viewer`` is given.

        Raises:
            BudgetNotFoundError: If no budget has this id.
        """
        if viewer is not None:
            self._store.record_view(
                budget_id,
                BudgetView(
                    timestamp=self._clock(),
                    ip_address=viewer.ip_address,
                    user_agent=viewer.user_agent or "Unknown",
                ),
            )
        return self._store.get(budget_id)

    def _commit(
        self,
        budget_id: str,
        mutate: Callable[[Budget, datetime], UpdateResult],
    ) -> UpdateResult:
        for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
            budget = self._store.get(budget_id)
            expected = budget.revision
            result = mutate(budget, self._clock())
            if result.action is VersionAction.NO_OP:
                return result
            try:
                self._store.save(budget, expected)
            except VersionConflictError:
                if attempt == MAX_SAVE_ATTEMPTS:
                    logger.warning(
                        "Budget %s: giving up after %d conflicting saves",
                        budget_id,
                        attempt,
                    )
                    raise
                logger.info("Budget %s: save conflict, retrying (%d)", budget_id, attempt)
                continue
            return result
        msg = f"Budget {budget_id}: save did not complete"
        raise VersionConflictError(msg)

    def update(
        self,
        budget_id: str,
        state: SelectionState | dict[str, Any],
        note: str | None = None,
        pin: bool = False,
    ) -> UpdateResult:
        """Save a new state for a budget under the version policy.

        A ``clientName`` carried in a dict ``state`` renames the budget.

        Raises:
            BudgetNotFoundError: If no budget has this id.
            QuoteValidationError: If ``state`` does not validate.
            VersionConflictError: If every attempt collided with another save.
        """
        selection = _parse_state(state)
        client_name = _state_text(state, "clientName")

        def mutate(budget: Budget, now: datetime) -> UpdateResult:
            locked = self._apply_locks(budget, selection)
            snapshot = self._snapshot(
                locked,
                budget.custom_catalog,
                client_name=client_name or budget.client_name,
                builder=budget.builder,
            )
            result = apply_update(budget, snapshot, now, note=note, pin=pin)
            if client_name and result.action is not VersionAction.NO_OP:
                budget.client_name = client_name
            return result

        return self._commit(budget_id, mutate)

    def pin_current(self, budget_id: str, note: str | None = None) -> UpdateResult:
        """Pin the budget's current state, e.g. once it has been sent out."""
        budget = self._store.get(budget_id)
        return self.update(budget_id, budget.current_state, note=note, pin=True)

    def restore(self, budget_id: str, version_number: int) -> UpdateResult:
        """Make an earlier version current again as a new pinned version.

        Raises:
            BudgetNotFoundError: If no budget has this id.
            VersionNotFoundError: If the budget has no such version.
        """
        return self._commit(
            budget_id,
            lambda budget, now: restore_version(budget, version_number, now),
        )

    def customize(
        self,
        budget_id: str,
        categories: Iterable[Category | dict[str, Any]],
        home_size: int,
        property_type: PropertyType | str,
        admin: bool = False,
    ) -> Budget:
        """Give one budget its own hand-edited pricing.

        Every category is flagged ``is_customized`` so its price is used
        as-is, the size and property type are locked, and the history is
        replaced by a single pinned version. This cannot be undone.

        Raises:
            AuthorizationError: If ``admin`` is not set.
            CatalogError: If the categories do not validate.
            BudgetNotFoundError: If no budget has this id.
        """
        if not admin:
            msg = "Customizing budget pricing requires admin access"
            raise AuthorizationError(msg)
        if home_size <= 0:
            msg = f"Home size must be positive, got {home_size}"
            raise QuoteValidationError(msg)

        try:
            key = PropertyType(property_type)
            custom = PricingCatalog(
                property_type=key,
                categories=[
                    (c if isinstance(c, Category) else Category.model_validate(c))
                    .model_copy(update={"is_customized": True})
                    for c in categories
                ],
                extras=self._engine.catalog_for(key).extras,
            )
        except (ValueError, ValidationError) as exc:
            msg = f"Invalid custom categories for budget {budget_id}: {exc}"
            raise CatalogError(msg) from exc

        def mutate(budget: Budget, now: datetime) -> UpdateResult:
            budget.is_customized = True
            budget.custom_catalog = custom
            budget.sqft_locked = home_size
            budget.property_type_locked = key
            budget.customized_at = now
            state = self._apply_locks(budget, _parse_state(budget.current_state))
            snapshot = self._snapshot(
                state.for_catalog(custom),
                custom,
                client_name=budget.client_name,
                builder=budget.builder,
            )
            version = reset_history(budget, snapshot, now, CUSTOMIZED_NOTE)
            return _reset_result(budget, version)

        self._commit(budget_id, mutate)
        logger.info(
            "Budget %s: customized %d categories (%s, %d sqft)",
            budget_id,
            len(custom.categories),
            key.value,
            home_size,
        )
        return self._store.get(budget_id)

    def delete(self, budget_id: str) -> None:
        """Delete a budget with its history.

        Raises:
            BudgetNotFoundError: If no budget has this id.
        """
        self._store.delete(budget_id)
        logger.info("Deleted budget %s", budget_id)

    def list_summaries(self) -> list[BudgetSummary]:
        """Summaries of every budget, most recently modified first."""
        summaries = [b.summary() for b in self._store.list()]
        summaries.sort(key=lambda s: s.last_modified, reverse=True)
        return summaries


def _reset_result(budget: Budget, version: Version) -> UpdateResult:
    return UpdateResult(
        created=True,
        version_number=version.version_number,
        consolidated=False,
        action=VersionAction.APPEND,
        version_count=len(budget.versions),
    )
