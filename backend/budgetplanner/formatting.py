"""Formatting helpers for quote and budget display.

Quotes are whole-dollar figures, so currency never shows cents
(e.g. '$48,300', '-$1,200').
"""

from __future__ import annotations

from datetime import UTC, datetime

from budgetplanner.pricing import round_half_up


def format_currency(amount: float | None) -> str:
    """Format a whole-dollar amount; None renders as '$0'."""
    if amount is None:
        return "$0"
    if amount < 0:
        return f"-${round_half_up(abs(amount)):,}"
    return f"${round_half_up(amount):,}"


def format_date(ts: datetime | None) -> str:
    """Format as 'Mar 4, 2025'; None renders as an em dash."""
    if ts is None:
        return "—"
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}"


def format_relative(ts: datetime | None, now: datetime | None = None) -> str:
    """Format a timestamp relative to ``now`` (e.g. '5m ago').

    - under a minute: 'Just now'
    - under an hour / a day / a week: '{n}m ago', '{n}h ago', '{n}d ago'
    - otherwise the plain date
    """
    if ts is None:
        return "Never"
    if now is None:
        now = datetime.now(UTC) if ts.tzinfo else datetime.now()
    seconds = int((now - ts).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    if seconds < 60:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return format_date(ts)
