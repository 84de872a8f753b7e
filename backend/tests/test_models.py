"""Tests for the pydantic domain models: validation and wire format."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from budgetplanner.models import (
    Budget,
    BudgetView,
    Category,
    PricingCatalog,
    PropertyType,
    SelectionState,
    Tier,
    TierOffering,
    Version,
)

NOW = datetime(2025, 3, 4, 12, 0, tzinfo=UTC)


def _catalog() -> PricingCatalog:
    return PricingCatalog.model_validate(
        {
            "propertyType": "residential",
            "categories": [
                {
                    "id": "audio",
                    "name": "Multi-Room Audio",
                    "desc": "Whole-home audio",
                    "sizeScale": 0.7,
                    "tiers": {"good": {"price": 9600}, "best": {"price": 32000}},
                },
                {
                    "id": "surround",
                    "name": "Surround Sound",
                    "tiers": {"better": {"price": 9900}},
                },
            ],
            "extras": [
                {"id": "leakDet", "name": "Leak Detection", "price": 3500, "default": True},
            ],
        }
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestCatalogModels:
    def test_accepts_camel_case_wire_format(self) -> None:
        catalog = _catalog()
        audio = catalog.category("audio")
        assert audio is not None
        assert audio.size_scale == 0.7
        assert audio.description == "Whole-home audio"
        assert set(audio.tiers) == {Tier.GOOD, Tier.BEST}

    def test_unknown_tier_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Category(id="x", name="X", tiers={"platinum": {"price": 100}})

    def test_empty_tiers_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Category(id="x", name="X", tiers={})

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TierOffering(price=-1)

    def test_non_finite_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TierOffering.model_validate({"price": "Infinity"})

    def test_duplicate_category_ids_rejected(self) -> None:
        cat = Category(id="x", name="X", tiers={Tier.GOOD: TierOffering(price=1)})
        with pytest.raises(ValidationError, match="duplicate category ids: x"):
            PricingCatalog(property_type=PropertyType.CONDO, categories=[cat, cat])

    def test_lookup_helpers_return_none_when_absent(self) -> None:
        catalog = _catalog()
        assert catalog.category("nope") is None
        assert catalog.extra("nope") is None
        assert catalog.category_ids == ["audio", "surround"]

    def test_offering_lookup_by_plain_string(self) -> None:
        audio = _catalog().category("audio")
        assert audio is not None
        offering = audio.offering("best")
        assert offering is not None
        assert offering.price == 32000
        assert audio.offering("better") is None
        assert audio.offering(None) is None

    def test_tier_labels(self) -> None:
        assert [t.label for t in Tier] == [
            "Good Tier",
            "Standard Tier",
            "Better Tier",
            "Best Tier",
        ]


# ---------------------------------------------------------------------------
# Selection state
# ---------------------------------------------------------------------------


class TestSelectionState:
    def test_defaults(self) -> None:
        state = SelectionState()
        assert state.home_size == 4000
        assert state.property_type == PropertyType.RESIDENTIAL
        assert state.selections == {}

    def test_none_and_empty_selections_normalise(self) -> None:
        state = SelectionState(selections={"a": "none", "b": "", "c": "good", "d": None})
        assert state.selections == {"a": None, "b": None, "c": "good", "d": None}
        assert state.chosen() == {"c": "good"}

    def test_unknown_tier_names_are_kept(self) -> None:
        state = SelectionState(selections={"audio": "platinum"})
        assert state.selections["audio"] == "platinum"

    @pytest.mark.parametrize("home_size", ["big", None, 0, -100, float("inf")])
    def test_bad_home_size_rejected(self, home_size: object) -> None:
        with pytest.raises(ValidationError):
            SelectionState.model_validate({"homeSize": home_size})

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-inf", float("nan")])
    def test_non_finite_amounts_rejected(self, amount: object) -> None:
        with pytest.raises(ValidationError):
            SelectionState.model_validate({"modifiers": [{"name": "x", "amount": amount}]})
        with pytest.raises(ValidationError):
            SelectionState.model_validate({"catMods": {"audio": {"amount": amount}}})

    def test_unknown_property_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SelectionState.model_validate({"propertyType": "villa"})

    def test_wire_round_trip_uses_cat_mods(self) -> None:
        state = SelectionState.model_validate(
            {
                "selections": {"audio": "good"},
                "catMods": {"audio": {"name": "Extra zone", "amount": 800}, "x": None},
                "homeSize": 5200,
                "propertyType": "condo",
            }
        )
        assert state.category_adjustments["audio"].amount == 800
        assert "x" not in state.category_adjustments
        wire = state.to_wire()
        assert wire["catMods"]["audio"] == {"name": "Extra zone", "amount": 800.0}
        assert wire["homeSize"] == 5200
        assert wire["propertyType"] == "condo"

    def test_for_catalog_seeds_missing_entries(self) -> None:
        state = SelectionState(selections={"audio": "best"}).for_catalog(_catalog())
        assert state.selections == {"audio": "best", "surround": None}
        assert set(state.category_adjustments) == {"audio", "surround"}
        assert state.category_adjustments["surround"].amount == 0
        assert state.extras == {"leakDet": True}

    def test_for_catalog_keeps_existing_entries(self) -> None:
        original = SelectionState(extras={"leakDet": False, "retired": True})
        seeded = original.for_catalog(_catalog())
        assert seeded.extras == {"leakDet": False, "retired": True}
        assert original.selections == {}


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------


class TestBudget:
    def _budget(self) -> Budget:
        return Budget(
            id="abcd2345",
            client_name="Smith",
            created=NOW,
            last_modified=NOW + timedelta(hours=1),
            current_state={"selections": {}, "total": 48300},
            versions=[
                Version(version_number=1, timestamp=NOW, state={}, pinned=True),
                Version(version_number=2, timestamp=NOW, state={"x": 1}),
            ],
            views=[
                BudgetView(timestamp=NOW, ip_address="10.0.0.1"),
                BudgetView(timestamp=NOW + timedelta(minutes=5)),
            ],
            version_sequence=2,
        )

    def test_derived_properties(self) -> None:
        budget = self._budget()
        assert budget.latest_version is not None
        assert budget.latest_version.version_number == 2
        assert budget.view_count == 2
        assert budget.last_viewed == NOW + timedelta(minutes=5)
        assert budget.views[1].user_agent == "Unknown"

    def test_version_lookup(self) -> None:
        budget = self._budget()
        v1 = budget.version(1)
        assert v1 is not None
        assert v1.pinned
        assert budget.version(9) is None

    def test_summary(self) -> None:
        summary = self._budget().summary()
        assert summary.id == "abcd2345"
        assert summary.version_count == 2
        assert summary.view_count == 2
        assert summary.current_total == 48300
        assert summary.is_customized is False

    def test_version_numbers_start_at_one(self) -> None:
        with pytest.raises(ValidationError):
            Version(version_number=0, timestamp=NOW, state={})
