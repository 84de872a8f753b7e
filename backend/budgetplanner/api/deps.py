"""Configuration and admin access checks for the FastAPI endpoints."""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass, field

from budgetplanner.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

ADMIN_KEY_ENV = "BUDGETPLANNER_ADMIN_KEY"
CORS_ORIGINS_ENV = "BUDGETPLANNER_CORS_ORIGINS"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)


@dataclass(frozen=True)
class ApiSettings:
    """Settings read from the environment when the app is created."""

    admin_key: str | None = None
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


def load_settings() -> ApiSettings:
    """Read ``ApiSettings`` from environment variables.

    An unset or blank admin key leaves the admin endpoints disabled.
    """
    admin_key = os.environ.get(ADMIN_KEY_ENV, "").strip() or None
    raw_origins = os.environ.get(CORS_ORIGINS_ENV, "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    if admin_key is None:
        logger.warning("%s is not set; admin endpoints are disabled", ADMIN_KEY_ENV)
    return ApiSettings(
        admin_key=admin_key,
        cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
    )


def check_admin_key(provided: str | None, expected: str | None) -> None:
    """Raise unless ``provided`` matches the configured admin key.

    Raises:
        AuthorizationError: If no key is configured or the key does not match.
    """
    if not expected:
        msg = "Admin access is not configured"
        raise AuthorizationError(msg)
    if not provided or not secrets.compare_digest(provided, expected):
        msg = "Invalid or missing admin key"
        raise AuthorizationError(msg)
