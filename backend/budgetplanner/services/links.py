"""Short link service: short codes that redirect to shared quote links."""

from __future__ import annotations

import logging
import re
import threading
from typing import TYPE_CHECKING

from budgetplanner.exceptions import (
    QuoteValidationError,
    ShortLinkConflictError,
    ShortLinkNotFoundError,
)
from budgetplanner.models.budget import ShortLink
from budgetplanner.services.budgets import utcnow
from budgetplanner.sharing import generate_code

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

logger = logging.getLogger(__name__)

_CUSTOM_CODE_DISALLOWED = re.compile(r"[^a-z0-9-]")


def sanitize_code(code: str) -> str:
    """Lower-case ``code`` and drop everything but ``a-z``, ``0-9`` and ``-``."""
    return _CUSTOM_CODE_DISALLOWED.sub("", code.lower())


class ShortLinkService:
    """In-memory registry of short links.

    Args:
        clock: Returns the current time; injectable for tests.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._links: dict[str, ShortLink] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def shorten(
        self,
        config: str,
        client_name: str | None = None,
        custom_code: str | None = None,
    ) -> ShortLink:
        """Register ``config`` (an encoded share query) under a short code.

        Raises:
            QuoteValidationError: If ``config`` is empty, or ``custom_code``
                has no usable characters.
            ShortLinkConflictError: If ``custom_code`` is already taken.
        """
        config = config.lstrip("?")
        if not config:
            msg = "Config string is required"
            raise QuoteValidationError(msg)

        with self._lock:
            if custom_code:
                code = sanitize_code(custom_code)
                if not code:
                    msg = f"Custom code {custom_code!r} has no valid characters"
                    raise QuoteValidationError(msg)
                if code in self._links:
                    msg = f"Custom code already in use: {code}"
                    raise ShortLinkConflictError(msg)
            else:
                code = generate_code()
                while code in self._links:
                    code = generate_code()

            link = ShortLink(
                code=code,
                config=config,
                client_name=client_name or None,
                created=self._clock(),
            )
            self._links[code] = link

        logger.info("Created short link /s/%s", code)
        return link.model_copy()

    def resolve(self, code: str) -> ShortLink:
        """Look up a code and count the access.

        Raises:
            ShortLinkNotFoundError: If the code is unknown.
        """
        with self._lock:
            link = self._links.get(code)
            if link is None:
                msg = f"Short link not found: {code}"
                raise ShortLinkNotFoundError(msg)
            link.access_count += 1
            link.last_accessed = self._clock()
            return link.model_copy()

    def list(self) -> list[ShortLink]:
        with self._lock:
            return [link.model_copy() for link in self._links.values()]
