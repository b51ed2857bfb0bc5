"""
Tests for the portal API client.
"""

import httpx
import pytest

from listing_portal.platform.errors import PortalApiError
from listing_portal.platform.portal_client import PortalClient
from tests.fakes import FakePortal, company, seller_user


class TestPortalClient:
    """PortalClient against a MockTransport portal."""

    @pytest.mark.asyncio
    async def test_sends_api_key_and_forwarded_credentials(self, portal_config):
        portal = FakePortal(user=seller_user())
        client = PortalClient(
            portal_config,
            cookies={"connect.sid": "abc"},
            authorization="Bearer token-1",
            transport=portal.transport,
        )
        async with client:
            await client.get_current_user()

        request = portal.requests[0]
        assert request.headers["bxiapikey"] == "test-api-key"
        assert request.headers["Authorization"] == "Bearer token-1"
        assert "connect.sid=abc" in request.headers["cookie"]
        assert str(request.url) == "http://portal.test/auth/logged_user"

    @pytest.mark.asyncio
    async def test_current_user_payload(self, portal_config):
        portal = FakePortal(user=seller_user(roleName="ADMIN"))
        async with PortalClient(portal_config, transport=portal.transport) as client:
            user = await client.get_current_user()
        assert user["roleName"] == "ADMIN"

    @pytest.mark.asyncio
    async def test_falsy_user_body_is_none(self, portal_config):
        portal = FakePortal(user=None)
        async with PortalClient(portal_config, transport=portal.transport) as client:
            assert await client.get_current_user() is None

    @pytest.mark.asyncio
    async def test_error_status_uses_upstream_message(self, portal_config):
        portal = FakePortal(user_status=401, error_message="Session expired")
        async with PortalClient(portal_config, transport=portal.transport) as client:
            with pytest.raises(PortalApiError) as exc_info:
                await client.get_current_user()
        assert exc_info.value.message == "Session expired"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_error_status_without_message(self, portal_config):
        portal = FakePortal(company_status=500)
        async with PortalClient(portal_config, transport=portal.transport) as client:
            with pytest.raises(PortalApiError) as exc_info:
                await client.get_owning_company()
        assert "500" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self, portal_config):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with PortalClient(portal_config, transport=httpx.MockTransport(refuse)) as client:
            with pytest.raises(PortalApiError) as exc_info:
                await client.get_current_user()
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_company_type_name_lookup(self, portal_config):
        portal = FakePortal(company=company("type-42"), company_type_name="Media")
        async with PortalClient(portal_config, transport=portal.transport) as client:
            name = await client.get_company_type_name("type-42")
        assert name == "Media"
        assert portal.paths() == ["/company_type/get_companyType/type-42"]

    @pytest.mark.asyncio
    async def test_company_type_name_falls_back_to_string_value(self, portal_config):
        def handler(request):
            return httpx.Response(200, json={"stringValue": "Hotels"})

        async with PortalClient(portal_config, transport=httpx.MockTransport(handler)) as client:
            assert await client.get_company_type_name("type-1") == "Hotels"

    @pytest.mark.asyncio
    async def test_company_type_name_absent(self, portal_config):
        def handler(request):
            return httpx.Response(200, json={})

        async with PortalClient(portal_config, transport=httpx.MockTransport(handler)) as client:
            assert await client.get_company_type_name("type-1") == ""
