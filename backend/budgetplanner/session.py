"""Caller-owned quote session with change listeners.

A ``QuoteSession`` holds one selection state and tells its subscribers
whenever it changes. Each frontend or CLI owns its own session, so two
quotes in one process never share state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from budgetplanner.models.selection import SelectionState

if TYPE_CHECKING:
    from collections.abc import Callable

    from budgetplanner.engine import QuoteEngine
    from budgetplanner.models.quote import Quote

    Listener = Callable[[SelectionState, Quote], None]

logger = logging.getLogger(__name__)


class QuoteSession:
    """Mutable selection state bound to a ``QuoteEngine``.

    Listeners are called with a snapshot of the new state and its quote
    after every change. A listener that raises is logged and skipped; the
    remaining listeners still run.
    """

    def __init__(
        self,
        engine: QuoteEngine,
        state: SelectionState | None = None,
    ) -> None:
        self._engine = engine
        self._state = self._seed(state or SelectionState())
        self._listeners: list[Listener] = []

    def _seed(self, state: SelectionState) -> SelectionState:
        return state.for_catalog(self._engine.catalog_for(state.property_type))

    @property
    def state(self) -> SelectionState:
        return self._state.model_copy(deep=True)

    def quote(self) -> Quote:
        return self._engine.quote(self._state)

    def update(self, **changes: Any) -> SelectionState:
        """Apply field changes, e.g. ``update(home_size=5200)``.

        Changing ``property_type`` seeds entries for the new catalog.

        Raises:
            pydantic.ValidationError: If a change does not validate.
        """
        merged = {**self._state.model_dump(), **changes}
        self._state = self._seed(SelectionState.model_validate(merged))
        self._notify()
        return self.state

    def replace(self, state: SelectionState) -> SelectionState:
        self._state = self._seed(state.model_copy(deep=True))
        self._notify()
        return self.state

    def reset(self) -> SelectionState:
        """Back to the default state for the current property type."""
        return self.replace(SelectionState(property_type=self._state.property_type))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        quote = self.quote()
        for listener in list(self._listeners):
            try:
                listener(self.state, quote.model_copy(deep=True))
            except Exception:
                logger.exception("Quote session listener %r failed", listener)
