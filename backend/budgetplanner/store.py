"""In-memory budget persistence with optimistic concurrency."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from budgetplanner.exceptions import BudgetNotFoundError, VersionConflictError

if TYPE_CHECKING:
    from budgetplanner.models.budget import Budget, BudgetView

logger = logging.getLogger(__name__)


class InMemoryBudgetStore:
    """Thread-safe budget storage keyed by budget id.

    Every read returns a deep copy, so callers mutate their own copy and
    hand it back through ``save``. ``save`` is a compare-and-swap on the
    budget's ``revision``: if another writer saved in between, the stored
    revision no longer matches and ``VersionConflictError`` is raised.
    """

    def __init__(self) -> None:
        self._budgets: dict[str, Budget] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._budgets)

    def __contains__(self, budget_id: object) -> bool:
        with self._lock:
            return budget_id in self._budgets

    def get(self, budget_id: str) -> Budget:
        """Return a copy of the budget.

        Raises:
            BudgetNotFoundError: If no budget has this id.
        """
        with self._lock:
            budget = self._budgets.get(budget_id)
            if budget is None:
                raise BudgetNotFoundError(budget_id)
            return budget.model_copy(deep=True)

    def insert(self, budget: Budget) -> None:
        """Store a new budget.

        Raises:
            VersionConflictError: If the id is already taken.
        """
        with self._lock:
            if budget.id in self._budgets:
                msg = f"Budget id already exists: {budget.id}"
                raise VersionConflictError(msg)
            self._budgets[budget.id] = budget.model_copy(deep=True)

    def save(self, budget: Budget, expected_revision: int) -> None:
        """Replace a stored budget if nobody else saved since it was read.

        Args:
            budget: The modified copy to store.
            expected_revision: ``revision`` of the copy as it was read.

        Raises:
            BudgetNotFoundError: If the budget was deleted meanwhile.
            VersionConflictError: If the stored revision moved on.
        """
        with self._lock:
            current = self._budgets.get(budget.id)
            if current is None:
                raise BudgetNotFoundError(budget.id)
            if current.revision != expected_revision:
                msg = (
                    f"Budget {budget.id} changed concurrently "
                    f"(expected revision {expected_revision}, "
                    f"found {current.revision})"
                )
                raise VersionConflictError(msg)
            merged = budget.model_copy(deep=True)
            merged.revision = expected_revision + 1
            # Views are only ever appended by record_view, outside the CAS.
            merged.views = [v.model_copy() for v in current.views]
            self._budgets[budget.id] = merged

    def delete(self, budget_id: str) -> None:
        """Remove a budget with its history and views.

        Raises:
            BudgetNotFoundError: If no budget has this id.
        """
        with self._lock:
            if self._budgets.pop(budget_id, None) is None:
                raise BudgetNotFoundError(budget_id)

    def list(self) -> list[Budget]:
        with self._lock:
            return [b.model_copy(deep=True) for b in self._budgets.values()]

    def record_view(self, budget_id: str, view: BudgetView) -> int:
        """Append a view record and return the new view count.

        Raises:
            BudgetNotFoundError: If no budget has this id.
        """
        with self._lock:
            budget = self._budgets.get(budget_id)
            if budget is None:
                raise BudgetNotFoundError(budget_id)
            budget.views.append(view.model_copy())
            return len(budget.views)
