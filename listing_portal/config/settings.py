"""
Listing portal configuration.

All settings are read from the environment once per process via
PortalConfig.from_env(). Unknown or malformed values degrade to defaults
with a warning; configuration never raises.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from listing_portal.entitlements.models import SELLER_HUB_PATH, AdminSourcePolicy

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:7000"
DEFAULT_SESSION_COOKIE = "listing_session"
DEFAULT_SESSION_TTL_SECONDS = 86400
DEFAULT_IDENTITY_WAIT_SECONDS = 10.0
DEFAULT_API_TIMEOUT_SECONDS = 30.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid numeric setting, using default", extra={"setting": name, "default": default})
        return default


def _parse_admin_policy(raw: Optional[str]) -> AdminSourcePolicy:
    if not raw or not raw.strip():
        return AdminSourcePolicy.ADMIN_ONLY
    try:
        return AdminSourcePolicy(raw.strip().lower())
    except ValueError:
        logger.warning(
            "Unknown admin source policy, falling back to admin_only",
            extra={"value": raw},
        )
        return AdminSourcePolicy.ADMIN_ONLY


@dataclass
class PortalConfig:
    """Listing portal configuration from environment."""
    api_base_url: str = DEFAULT_API_URL
    api_key: str = ""
    api_timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS
    redis_url: Optional[str] = None
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    session_cookie: str = DEFAULT_SESSION_COOKIE
    admin_source_policy: AdminSourcePolicy = AdminSourcePolicy.ADMIN_ONLY
    identity_wait_seconds: float = DEFAULT_IDENTITY_WAIT_SECONDS
    seller_hub_path: str = SELLER_HUB_PATH
    frontend_url: str = ""

    @classmethod
    def from_env(cls) -> "PortalConfig":
        """Load configuration from environment variables."""
        return cls(
            api_base_url=os.getenv("PORTAL_API_URL", DEFAULT_API_URL).rstrip("/"),
            api_key=os.getenv("PORTAL_API_KEY", ""),
            api_timeout_seconds=_float_env("PORTAL_API_TIMEOUT_SECONDS", DEFAULT_API_TIMEOUT_SECONDS),
            redis_url=os.getenv("REDIS_URL") or None,
            session_ttl_seconds=int(_float_env("LISTING_SESSION_TTL_SECONDS", DEFAULT_SESSION_TTL_SECONDS)),
            session_cookie=os.getenv("LISTING_SESSION_COOKIE", DEFAULT_SESSION_COOKIE),
            admin_source_policy=_parse_admin_policy(os.getenv("LISTING_ADMIN_SOURCE_POLICY")),
            identity_wait_seconds=_float_env("LISTING_IDENTITY_WAIT_SECONDS", DEFAULT_IDENTITY_WAIT_SECONDS),
            seller_hub_path=os.getenv("SELLER_HUB_PATH", SELLER_HUB_PATH),
            frontend_url=os.getenv("FRONTEND_URL", ""),
        )
