"""Tests for the budget version policy: no-op, consolidate, append, restore."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from budgetplanner.exceptions import VersionNotFoundError
from budgetplanner.models.budget import Budget, Version
from budgetplanner.models.enums import BudgetPhase, VersionAction
from budgetplanner.versioning import (
    CONSOLIDATION_WINDOW,
    apply_update,
    budget_phase,
    decide_update,
    normalize_state,
    reset_history,
    restore_version,
)

T0 = datetime(2025, 3, 4, 9, 0, tzinfo=UTC)


def _state(audio: str = "good", **extra: Any) -> dict[str, Any]:
    return {"selections": {"audio": audio}, "homeSize": 4000, **extra}


def _new_budget(state: dict[str, Any] | None = None) -> Budget:
    """A budget as created: one pinned initial version."""
    state = state or _state()
    return Budget(
        id="abcd2345",
        created=T0,
        last_modified=T0,
        current_state=state,
        versions=[
            Version(
                version_number=1,
                timestamp=T0,
                state=state,
                note="Initial budget",
                pinned=True,
            )
        ],
        version_sequence=1,
    )


# ---------------------------------------------------------------------------
# normalize_state
# ---------------------------------------------------------------------------


class TestNormalizeState:
    def test_key_order_does_not_matter(self) -> None:
        a = {"selections": {"a": "good", "b": None}, "homeSize": 4000}
        b = {"homeSize": 4000, "selections": {"b": None, "a": "good"}}
        assert normalize_state(a) == normalize_state(b)

    def test_volatile_keys_are_ignored_at_any_depth(self) -> None:
        a = _state(timestamp="2025-03-04T09:00:00Z", meta={"savedAt": 1})
        b = _state(timestamp="2025-03-05T10:00:00Z", meta={"savedAt": 2})
        assert normalize_state(a) == normalize_state(b)

    def test_real_changes_are_detected(self) -> None:
        assert normalize_state(_state("good")) != normalize_state(_state("best"))


# ---------------------------------------------------------------------------
# decide_update / budget_phase
# ---------------------------------------------------------------------------


class TestDecideUpdate:
    def _latest(self, pinned: bool = False) -> Version:
        return Version(version_number=3, timestamp=T0, state=_state(), pinned=pinned)

    def test_identical_state_is_no_op(self) -> None:
        assert decide_update(self._latest(), _state(), T0) is VersionAction.NO_OP

    def test_identical_state_with_pin_pins(self) -> None:
        action = decide_update(self._latest(), _state(), T0, pin=True)
        assert action is VersionAction.PINNED

    def test_identical_state_with_pin_on_pinned_is_no_op(self) -> None:
        action = decide_update(self._latest(pinned=True), _state(), T0, pin=True)
        assert action is VersionAction.NO_OP

    def test_change_inside_window_overwrites(self) -> None:
        now = T0 + CONSOLIDATION_WINDOW - timedelta(seconds=1)
        assert decide_update(self._latest(), _state("best"), now) is VersionAction.OVERWRITE

    def test_change_at_window_edge_appends(self) -> None:
        now = T0 + CONSOLIDATION_WINDOW
        assert decide_update(self._latest(), _state("best"), now) is VersionAction.APPEND

    def test_change_on_pinned_appends(self) -> None:
        action = decide_update(self._latest(pinned=True), _state("best"), T0)
        assert action is VersionAction.APPEND

    def test_change_with_pin_appends(self) -> None:
        action = decide_update(self._latest(), _state("best"), T0, pin=True)
        assert action is VersionAction.APPEND

    def test_no_history_appends(self) -> None:
        assert decide_update(None, _state(), T0) is VersionAction.APPEND


class TestBudgetPhase:
    def test_lifecycle(self) -> None:
        budget = _new_budget()
        assert budget_phase(budget, T0) is BudgetPhase.NO_HISTORY

        apply_update(budget, _state("best"), T0 + timedelta(minutes=1))
        assert budget_phase(budget, T0 + timedelta(minutes=2)) is BudgetPhase.FRESH
        assert budget_phase(budget, T0 + timedelta(minutes=30)) is BudgetPhase.STALE

        apply_update(budget, _state("best"), T0 + timedelta(minutes=31), pin=True)
        assert budget_phase(budget, T0 + timedelta(minutes=32)) is BudgetPhase.LOCKED


# ---------------------------------------------------------------------------
# apply_update
# ---------------------------------------------------------------------------


class TestApplyUpdate:
    def test_repeated_identical_saves_create_nothing(self) -> None:
        budget = _new_budget()
        first = apply_update(budget, _state(), T0 + timedelta(minutes=1))
        second = apply_update(budget, _state(), T0 + timedelta(minutes=2))
        assert first.action is VersionAction.NO_OP
        assert second.action is VersionAction.NO_OP
        assert not second.created
        assert second.version_number == 1
        assert len(budget.versions) == 1
        assert budget.last_modified == T0

    def test_first_change_appends_after_pinned_initial_version(self) -> None:
        budget = _new_budget()
        result = apply_update(budget, _state("best"), T0 + timedelta(minutes=1))
        assert result.created
        assert not result.consolidated
        assert result.version_number == 2
        assert budget.versions[-1].note == "Auto-save"
        assert not budget.versions[-1].pinned
        assert budget.current_state == _state("best")

    def test_saves_inside_window_consolidate(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("standard"), T0 + timedelta(minutes=1))
        now = T0 + timedelta(minutes=10)
        result = apply_update(budget, _state("better"), now)
        assert result.consolidated
        assert not result.created
        assert result.version_number == 2
        assert len(budget.versions) == 2
        assert budget.versions[-1].state == _state("better")
        assert budget.versions[-1].timestamp == now
        assert budget.current_state == _state("better")
        assert budget.last_modified == now

    def test_window_is_measured_from_last_overwrite(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("standard"), T0 + timedelta(minutes=1))
        apply_update(budget, _state("better"), T0 + timedelta(minutes=14))
        result = apply_update(budget, _state("best"), T0 + timedelta(minutes=20))
        assert result.action is VersionAction.OVERWRITE
        assert len(budget.versions) == 2

    def test_save_after_window_appends(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("standard"), T0 + timedelta(minutes=1))
        result = apply_update(budget, _state("better"), T0 + timedelta(minutes=17))
        assert result.created
        assert result.version_number == 3
        assert len(budget.versions) == 3

    def test_pin_with_change_appends_shared_version(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("standard"), T0 + timedelta(minutes=1))
        result = apply_update(budget, _state("best"), T0 + timedelta(minutes=2), pin=True)
        assert result.created
        latest = budget.versions[-1]
        assert latest.pinned
        assert latest.note == "Shared/Emailed"

    def test_pin_without_change_pins_in_place(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("standard"), T0 + timedelta(minutes=1))
        result = apply_update(
            budget, _state("standard"), T0 + timedelta(minutes=2), note="Sent to client", pin=True
        )
        assert result.action is VersionAction.PINNED
        assert not result.created
        assert len(budget.versions) == 2
        assert budget.versions[-1].pinned
        assert budget.versions[-1].note == "Sent to client"

    def test_save_after_pin_appends(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("standard"), T0 + timedelta(minutes=1), pin=True)
        result = apply_update(budget, _state("better"), T0 + timedelta(minutes=2))
        assert result.created
        assert len(budget.versions) == 3

    def test_caller_note_wins(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("best"), T0 + timedelta(minutes=1), note="Walkthrough")
        assert budget.versions[-1].note == "Walkthrough"

    def test_numbers_come_from_sequence_not_length(self) -> None:
        budget = _new_budget()
        budget.version_sequence = 7
        result = apply_update(budget, _state("best"), T0 + timedelta(minutes=1))
        assert result.version_number == 8
        assert budget.version_sequence == 8

    def test_volatile_only_change_is_no_op(self) -> None:
        budget = _new_budget(_state(savedAt="a"))
        result = apply_update(budget, _state(savedAt="b"), T0 + timedelta(minutes=1))
        assert result.action is VersionAction.NO_OP


# ---------------------------------------------------------------------------
# restore_version / reset_history
# ---------------------------------------------------------------------------


class TestRestoreVersion:
    def test_restore_appends_pinned_copy(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("best"), T0 + timedelta(minutes=1))
        result = restore_version(budget, 1, T0 + timedelta(minutes=2))
        assert result.created
        assert not result.consolidated
        assert result.version_number == 3
        restored = budget.versions[-1]
        assert restored.pinned
        assert "1" in restored.note
        assert restored.note == "Restored to version 1"
        assert restored.state == _state("good")
        assert budget.current_state == _state("good")

    def test_restore_never_consolidates(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("best"), T0 + timedelta(minutes=1))
        restore_version(budget, 2, T0 + timedelta(minutes=2))
        assert len(budget.versions) == 3

    def test_restored_state_is_independent(self) -> None:
        budget = _new_budget()
        restore_version(budget, 1, T0 + timedelta(minutes=1))
        budget.versions[-1].state["homeSize"] = 9999
        assert budget.versions[0].state["homeSize"] == 4000

    def test_unknown_version(self) -> None:
        budget = _new_budget()
        with pytest.raises(VersionNotFoundError, match="Version 5 not found for budget abcd2345"):
            restore_version(budget, 5, T0)


class TestResetHistory:
    def test_reset_leaves_single_pinned_v1(self) -> None:
        budget = _new_budget()
        apply_update(budget, _state("best"), T0 + timedelta(minutes=1))
        apply_update(budget, _state("better"), T0 + timedelta(minutes=30))
        version = reset_history(budget, _state("standard"), T0 + timedelta(hours=1), "Customized")
        assert version.version_number == 1
        assert version.pinned
        assert [v.version_number for v in budget.versions] == [1]
        assert budget.version_sequence == 1
        assert budget.current_state == _state("standard")

        result = apply_update(budget, _state("good"), T0 + timedelta(hours=2))
        assert result.version_number == 2
