"""Budget version policy: when a save appends, consolidates, or does nothing.

Rapid auto-saves would otherwise flood a budget's history, so saves are
merged into the latest version while it is young and unpinned:

1. **No-op** — the normalised new state equals the latest version's state.
   A pin request on an unpinned latest version still pins it in place.
2. **Overwrite** — the latest version is unpinned, younger than
   ``CONSOLIDATION_WINDOW``, and no pin was requested: its state and
   timestamp are replaced, the version number is unchanged.
3. **Append** — anything else creates version ``N + 1``.

These functions only mutate the ``Budget`` they are given; persisting it
(and serialising concurrent writers) is the store's job. Version numbers
come from the budget's monotonic ``version_sequence``, never from counting
the history.
"""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from budgetplanner.exceptions import VersionNotFoundError
from budgetplanner.models.budget import UpdateResult, Version
from budgetplanner.models.enums import BudgetPhase, VersionAction

if TYPE_CHECKING:
    from datetime import datetime

    from budgetplanner.models.budget import Budget

logger = logging.getLogger(__name__)

CONSOLIDATION_WINDOW = timedelta(minutes=15)

AUTO_SAVE_NOTE = "Auto-save"
SHARED_NOTE = "Shared/Emailed"
INITIAL_NOTE = "Initial budget"

# Keys whose values change on every save without changing the quote.
VOLATILE_KEYS = frozenset(
    {"timestamp", "savedAt", "updatedAt", "lastModified", "generatedAt"}
)


def _strip_volatile(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: _strip_volatile(v) for k, v in value.items() if k not in VOLATILE_KEYS
        }
    if isinstance(value, list):
        return [_strip_volatile(v) for v in value]
    return value


def normalize_state(state: dict[str, Any]) -> str:
    """Canonical string form of a state for change detection."""
    return json.dumps(
        _strip_volatile(state), sort_keys=True, separators=(",", ":"), default=str
    )


def states_equal(a: dict[str, Any], b: dict[str, Any]) -> bool:
    return normalize_state(a) == normalize_state(b)


def _in_window(version: Version, now: datetime) -> bool:
    return now - version.timestamp < CONSOLIDATION_WINDOW


def budget_phase(budget: Budget, now: datetime) -> BudgetPhase:
    """Classify the budget's latest version for the next save."""
    latest = budget.latest_version
    if latest is None or (len(budget.versions) == 1 and latest.pinned):
        return BudgetPhase.NO_HISTORY
    if latest.pinned:
        return BudgetPhase.LOCKED
    if _in_window(latest, now):
        return BudgetPhase.FRESH
    return BudgetPhase.STALE


def decide_update(
    latest: Version | None,
    new_state: dict[str, Any],
    now: datetime,
    pin: bool = False,
) -> VersionAction:
    """Pick what a save of ``new_state`` does to the history."""
    if latest is None:
        return VersionAction.APPEND
    if states_equal(latest.state, new_state):
        if pin and not latest.pinned:
            return VersionAction.PINNED
        return VersionAction.NO_OP
    if not latest.pinned and not pin and _in_window(latest, now):
        return VersionAction.OVERWRITE
    return VersionAction.APPEND


def _append(
    budget: Budget,
    state: dict[str, Any],
    now: datetime,
    note: str,
    pinned: bool,
) -> Version:
    budget.version_sequence += 1
    version = Version(
        version_number=budget.version_sequence,
        timestamp=now,
        state=dict(state),
        note=note,
        pinned=pinned,
    )
    budget.versions.append(version)
    return version


def _result(
    budget: Budget, action: VersionAction, version_number: int
) -> UpdateResult:
    return UpdateResult(
        created=action is VersionAction.APPEND,
        version_number=version_number,
        consolidated=action is VersionAction.OVERWRITE,
        action=action,
        version_count=len(budget.versions),
    )


def apply_update(
    budget: Budget,
    new_state: dict[str, Any],
    now: datetime,
    note: str | None = None,
    pin: bool = False,
) -> UpdateResult:
    """Apply a save to ``budget`` in place and report what happened."""
    latest = budget.latest_version
    action = decide_update(latest, new_state, now, pin)

    if action is VersionAction.NO_OP:
        assert latest is not None
        return _result(budget, action, latest.version_number)

    if action is VersionAction.PINNED:
        assert latest is not None
        latest.pinned = True
        if note:
            latest.note = note
        budget.last_modified = now
        logger.info(
            "Budget %s: pinned version %d", budget.id, latest.version_number
        )
        return _result(budget, action, latest.version_number)

    if action is VersionAction.OVERWRITE:
        assert latest is not None
        latest.state = dict(new_state)
        latest.timestamp = now
        version_number = latest.version_number
    else:
        default_note = SHARED_NOTE if pin else AUTO_SAVE_NOTE
        version_number = _append(
            budget, new_state, now, note or default_note, pinned=pin
        ).version_number

    budget.current_state = dict(new_state)
    budget.last_modified = now
    logger.info(
        "Budget %s: %s version %d (%d in history)",
        budget.id,
        "consolidated into" if action is VersionAction.OVERWRITE else "created",
        version_number,
        len(budget.versions),
    )
    return _result(budget, action, version_number)


def restore_version(
    budget: Budget, version_number: int, now: datetime
) -> UpdateResult:
    """Append a pinned copy of ``version_number`` and make it current.

    Raises:
        VersionNotFoundError: If the budget has no such version.
    """
    target = budget.version(version_number)
    if target is None:
        raise VersionNotFoundError(budget.id, version_number)
    restored = _append(
        budget,
        target.state,
        now,
        f"Restored to version {version_number}",
        pinned=True,
    )
    budget.current_state = dict(target.state)
    budget.last_modified = now
    logger.info(
        "Budget %s: restored version %d as version %d",
        budget.id,
        version_number,
        restored.version_number,
    )
    return _result(budget, VersionAction.APPEND, restored.version_number)


def reset_history(
    budget: Budget,
    state: dict[str, Any],
    now: datetime,
    note: str,
) -> Version:
    """Discard the whole history and reseed it with a pinned version 1.

    This is irreversible; callers gate it behind an admin capability.
    """
    discarded = len(budget.versions)
    budget.versions.clear()
    budget.version_sequence = 0
    version = _append(budget, state, now, note, pinned=True)
    budget.current_state = dict(state)
    budget.last_modified = now
    logger.info(
        "Budget %s: history reset (%d versions discarded)", budget.id, discarded
    )
    return version
