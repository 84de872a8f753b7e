"""Tests for the ShortLinkService."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from budgetplanner.exceptions import (
    QuoteValidationError,
    ShortLinkConflictError,
    ShortLinkNotFoundError,
)
from budgetplanner.services.links import ShortLinkService, sanitize_code
from budgetplanner.sharing import CODE_ALPHABET

T0 = datetime(2025, 3, 4, 9, 0, tzinfo=UTC)


@pytest.fixture()
def times() -> list[datetime]:
    return [T0]


@pytest.fixture()
def links(times: list[datetime]) -> ShortLinkService:
    return ShortLinkService(clock=lambda: times[-1])


class TestShorten:
    def test_generated_code(self, links: ShortLinkService) -> None:
        link = links.shorten("sqft=5200&prop=residential", client_name="Smith")
        assert len(link.code) == 6
        assert set(link.code) <= set(CODE_ALPHABET)
        assert link.config == "sqft=5200&prop=residential"
        assert link.client_name == "Smith"
        assert link.created == T0
        assert link.access_count == 0
        assert link.last_accessed is None

    def test_leading_question_mark_is_dropped(self, links: ShortLinkService) -> None:
        assert links.shorten("?sqft=5200").config == "sqft=5200"

    def test_custom_code_is_sanitized(self, links: ShortLinkService) -> None:
        link = links.shorten("sqft=5200", custom_code="Smith Residence!")
        assert link.code == "smithresidence"

    def test_custom_code_conflict(self, links: ShortLinkService) -> None:
        links.shorten("sqft=5200", custom_code="smith-home")
        with pytest.raises(ShortLinkConflictError, match="smith-home"):
            links.shorten("sqft=6000", custom_code="SMITH-HOME")

    def test_custom_code_without_valid_characters(self, links: ShortLinkService) -> None:
        with pytest.raises(QuoteValidationError):
            links.shorten("sqft=5200", custom_code="!!!")

    @pytest.mark.parametrize("config", ["", "?"])
    def test_empty_config_rejected(self, links: ShortLinkService, config: str) -> None:
        with pytest.raises(QuoteValidationError, match="Config string is required"):
            links.shorten(config)


class TestResolve:
    def test_resolve_counts_access(
        self, links: ShortLinkService, times: list[datetime]
    ) -> None:
        code = links.shorten("sqft=5200").code
        times.append(T0 + timedelta(hours=2))
        first = links.resolve(code)
        times.append(T0 + timedelta(hours=3))
        second = links.resolve(code)
        assert first.access_count == 1
        assert second.access_count == 2
        assert second.last_accessed == T0 + timedelta(hours=3)

    def test_unknown_code(self, links: ShortLinkService) -> None:
        with pytest.raises(ShortLinkNotFoundError):
            links.resolve("zzzzzz")

    def test_list(self, links: ShortLinkService) -> None:
        links.shorten("sqft=5200", custom_code="a")
        links.shorten("sqft=6000", custom_code="b")
        assert sorted(link.code for link in links.list()) == ["a", "b"]


def test_sanitize_code() -> None:
    assert sanitize_code("Naples_Villa-2") == "naplesvilla-2"
