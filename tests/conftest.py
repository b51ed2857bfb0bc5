"""
Shared pytest fixtures for listing portal tests.
"""

import pytest

from listing_portal.config.settings import PortalConfig
from listing_portal.entitlements.models import ArrivalContext
from tests.fakes import PORTAL_URL


@pytest.fixture
def portal_config():
    return PortalConfig(api_base_url=PORTAL_URL, api_key="test-api-key", identity_wait_seconds=5.0)


@pytest.fixture
def no_arrival():
    return ArrivalContext()


@pytest.fixture
def dashboard_arrival():
    return ArrivalContext(source="dashboard")


@pytest.fixture
def admin_arrival():
    return ArrivalContext(source="admin")
