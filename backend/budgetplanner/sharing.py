"""Share links: random codes and the query-string form of a selection state.

A shared quote travels as a URL query string::

    client=Smith&sqft=5200&prop=residential&sel={"audio":"best"}&ext={...}

Decoding is tolerant. A field that is missing, out of range, or not valid
JSON is skipped and the rest of the link still loads.
"""

from __future__ import annotations

import json
import logging
import math
import re
import secrets
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode

from budgetplanner.models.enums import PropertyType, Tier
from budgetplanner.models.selection import SelectionState

logger = logging.getLogger(__name__)

# No 0/o, 1/l: codes are read aloud and typed by hand.
CODE_ALPHABET = "abcdefghijkmnpqrstuvwxyz23456789"
DEFAULT_CODE_LENGTH = 6

MIN_SHARED_SQFT = 1500
MAX_SHARED_SQFT = 20000

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_JSON_SEPARATORS = (",", ":")


@dataclass(frozen=True)
class DecodedShare:
    """Result of decoding a share query string."""

    state: SelectionState
    client_name: str | None = None
    builder: str | None = None
    loaded: bool = False


def generate_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """Random code drawn from ``CODE_ALPHABET``."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def _number(value: float) -> float | int:
    return int(value) if float(value).is_integer() else value


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=_JSON_SEPARATORS)


def encode_state(
    state: SelectionState,
    client_name: str | None = None,
    builder: str | None = None,
) -> str:
    """Encode ``state`` as a share query string (without the leading '?')."""
    params: list[tuple[str, str]] = []
    if client_name:
        params.append(("client", client_name))
    if builder:
        params.append(("builder", builder))
    params.append(("sqft", str(state.home_size)))
    params.append(("prop", state.property_type.value))

    chosen = state.chosen()
    if chosen:
        params.append(("sel", _dumps(chosen)))
    if state.extras:
        params.append(("ext", _dumps(state.extras)))

    mods = [
        {"n": m.name, "a": _number(m.amount)}
        for m in state.modifiers
        if m.name or m.amount
    ]
    if mods:
        params.append(("mods", _dumps(mods)))

    cm = {
        cid: {"n": adj.name, "a": _number(adj.amount)}
        for cid, adj in state.category_adjustments.items()
        if adj.name or adj.amount
    }
    if cm:
        params.append(("cm", _dumps(cm)))

    return urlencode(params)


def _parse_int(raw: str) -> int | None:
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        return None


def _parse_amount(raw: Any) -> float:
    """Lenient numeric parse; anything unusable becomes 0."""
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _parse_row(raw: Any) -> dict[str, Any]:
    row = raw if isinstance(raw, dict) else {}
    return {"name": str(row.get("n") or ""), "amount": _parse_amount(row.get("a"))}


def _load_json(params: dict[str, str], key: str) -> Any:
    try:
        return json.loads(params[key])
    except ValueError:
        # JSONDecodeError, or an integer past the int conversion digit limit
        logger.warning("Skipping malformed %r in share link", key)
        return None


def decode_state(query: str, base: SelectionState | None = None) -> DecodedShare:
    """Decode a share query string on top of ``base`` (default: empty state).

    ``loaded`` is True when at least one field was applied.
    """
    params: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        params.setdefault(key, value)

    updates: dict[str, Any] = {}
    loaded = False
    client_name = params.get("client")
    builder = params.get("builder")
    if client_name is not None or builder is not None:
        loaded = True

    prop = params.get("prop")
    if prop in {p.value for p in PropertyType}:
        updates["property_type"] = prop
        loaded = True

    if "sqft" in params:
        sqft = _parse_int(params["sqft"])
        if sqft is not None and MIN_SHARED_SQFT <= sqft <= MAX_SHARED_SQFT:
            updates["home_size"] = sqft
            loaded = True

    if "sel" in params:
        sel = _load_json(params, "sel")
        if isinstance(sel, dict):
            valid = {t.value for t in Tier}
            selections = {
                cid: t for cid, t in sel.items() if isinstance(t, str) and t in valid
            }
            updates["selections"] = selections
            loaded = loaded or bool(selections)
        elif sel is not None:
            logger.warning("Skipping non-object 'sel' in share link")

    if "ext" in params:
        ext = _load_json(params, "ext")
        if isinstance(ext, dict):
            updates["extras"] = {eid: bool(on) for eid, on in ext.items()}
            loaded = True

    if "mods" in params:
        mods = _load_json(params, "mods")
        if isinstance(mods, list):
            updates["modifiers"] = [_parse_row(m) for m in mods]
            loaded = True

    if "cm" in params:
        cm = _load_json(params, "cm")
        if isinstance(cm, dict):
            updates["category_adjustments"] = {
                cid: _parse_row(m) for cid, m in cm.items()
            }
            loaded = True

    base = base or SelectionState()
    state = SelectionState.model_validate({**base.model_dump(), **updates})
    return DecodedShare(
        state=state, client_name=client_name, builder=builder, loaded=loaded
    )
