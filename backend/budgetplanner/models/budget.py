"""Persisted budget, version history, and short link models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from budgetplanner.models.base import WireModel
from budgetplanner.models.catalog import PricingCatalog  # noqa: TCH001 (pydantic resolves at runtime)
from budgetplanner.models.enums import PropertyType, VersionAction


class Version(WireModel):
    """A snapshot of a budget's state.

    Only the latest version may change, and only while it is unpinned and
    inside the consolidation window.
    """

    version_number: int = Field(ge=1)
    timestamp: datetime
    state: dict[str, Any]
    note: str = ""
    pinned: bool = False


class BudgetView(WireModel):
    """A record of a client opening a live budget link."""

    timestamp: datetime
    ip_address: str | None = None
    user_agent: str = "Unknown"


class BudgetSummary(WireModel):
    """List-view projection of a budget without its history."""

    id: str
    client_name: str | None
    builder: str | None
    created: datetime
    last_modified: datetime
    view_count: int
    last_viewed: datetime | None
    version_count: int
    current_total: float
    is_customized: bool


class Budget(WireModel):
    """A named, versioned quote."""

    id: str
    client_name: str | None = None
    builder: str | None = None
    created: datetime
    last_modified: datetime
    current_state: dict[str, Any]
    versions: list[Version] = Field(default_factory=list)
    views: list[BudgetView] = Field(default_factory=list)
    version_sequence: int = 0
    # Bumped by every store commit; the compare-and-swap token.
    revision: int = 0

    is_customized: bool = False
    custom_catalog: PricingCatalog | None = None
    sqft_locked: int | None = None
    property_type_locked: PropertyType | None = None
    customized_at: datetime | None = None

    @property
    def latest_version(self) -> Version | None:
        return self.versions[-1] if self.versions else None

    @property
    def view_count(self) -> int:
        return len(self.views)

    @property
    def last_viewed(self) -> datetime | None:
        return self.views[-1].timestamp if self.views else None

    def version(self, version_number: int) -> Version | None:
        return next(
            (v for v in self.versions if v.version_number == version_number),
            None,
        )

    def summary(self) -> BudgetSummary:
        return BudgetSummary(
            id=self.id,
            client_name=self.client_name,
            builder=self.builder,
            created=self.created,
            last_modified=self.last_modified,
            view_count=self.view_count,
            last_viewed=self.last_viewed,
            version_count=len(self.versions),
            current_total=float(self.current_state.get("total") or 0),
            is_customized=self.is_customized,
        )


class UpdateResult(WireModel):
    """What a save did to the version history."""

    created: bool
    version_number: int
    consolidated: bool
    action: VersionAction
    version_count: int


class ShortLink(WireModel):
    """A short code that redirects to an encoded selection query string."""

    code: str
    config: str
    client_name: str | None = None
    created: datetime
    last_accessed: datetime | None = None
    access_count: int = 0
