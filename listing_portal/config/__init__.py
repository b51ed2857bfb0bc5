"""Configuration module for the listing portal."""

from listing_portal.config.settings import (
    PortalConfig,
    SELLER_HUB_PATH,
)

__all__ = [
    "PortalConfig",
    "SELLER_HUB_PATH",
]
