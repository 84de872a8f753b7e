"""Tests for proposal data and the proposal email body."""

from __future__ import annotations

import pytest

from budgetplanner.factory import create_default_engine
from budgetplanner.models.enums import PropertyType
from budgetplanner.models.quote import Quote
from budgetplanner.models.selection import SelectionState
from budgetplanner.services.proposal import (
    DEFAULT_SUBJECT,
    Proposal,
    ProposalRow,
    build_proposal,
    render_proposal_email,
)


@pytest.fixture()
def quote() -> Quote:
    engine = create_default_engine()
    state = SelectionState(
        selections={"networking": "good", "audio": "best"}, home_size=6000
    )
    return engine.quote(state)


class TestBuildProposal:
    def test_collects_totals_and_rows(self, quote: Quote) -> None:
        proposal = build_proposal(quote, recipient_name="Dana")
        assert proposal.total == quote.totals.grand_total
        assert proposal.tier_label == "Best Tier"
        assert proposal.recipient_name == "Dana"
        assert proposal.subject == DEFAULT_SUBJECT
        assert [r.name for r in proposal.rows] == [
            "Whole-Home WiFi & Networking",
            "Multi-Room Audio",
        ]
        assert [r.price for r in proposal.rows] == [8000, 43200]

    def test_custom_subject(self, quote: Quote) -> None:
        assert build_proposal(quote, subject="Smith budget").subject == "Smith budget"


class TestRenderProposalEmail:
    def test_contains_total_and_rows(self, quote: Quote) -> None:
        html = render_proposal_email(build_proposal(quote, recipient_name="Dana"))
        assert html.startswith("<!DOCTYPE html>")
        assert "Hi Dana," in html
        # 51200 + 3584 tax
        assert "$54,784" in html
        assert "$43,200" in html
        assert "Best Tier" in html
        assert "Residential Technology Budget" in html

    def test_generic_greeting(self, quote: Quote) -> None:
        html = render_proposal_email(build_proposal(quote))
        assert "Hi," in html

    def test_user_text_is_escaped(self) -> None:
        proposal = Proposal(
            total=1000,
            tier_label="",
            property_type=PropertyType.CONDO,
            rows=[ProposalRow(name="<script>alert(1)</script>", tier="good", price=1000)],
            recipient_name="Tom & Jerry",
        )
        html = render_proposal_email(proposal)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Hi Tom &amp; Jerry," in html
        assert "Condo Technology Budget" in html

    def test_no_rows_omits_table(self) -> None:
        proposal = Proposal(total=0, tier_label="", property_type=PropertyType.RESIDENTIAL)
        html = render_proposal_email(proposal)
        assert "Category</th>" not in html
        assert "$0" in html
