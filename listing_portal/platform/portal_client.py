"""
Portal API client for the identity lookup chain.

Handles:
- Current user lookup (auth/logged_user)
- Owning company lookup (auth/getauthsCompany)
- Company type name lookup (company_type/get_companyType/{id})

SECURITY:
- The caller's session cookie / Authorization header are forwarded as-is;
  this client never mints or inspects credentials.
- The static API key is sent in the bxiapikey header, never logged.
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from listing_portal.config.settings import PortalConfig
from listing_portal.platform.errors import PortalApiError

logger = logging.getLogger(__name__)

LOGGED_USER_PATH = "auth/logged_user"
AUTH_COMPANY_PATH = "auth/getauthsCompany"
COMPANY_TYPE_PATH = "company_type/get_companyType/{company_type_id}"

DEFAULT_ERROR_MESSAGE = "Auth check failed"


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"Request failed with status code {response.status_code}"


class PortalClient:
    """
    Async client for the portal's remote API.

    One instance per inbound request context: the forwarded credentials are
    those of the browser session that triggered the lookup.
    """

    def __init__(
        self,
        config: PortalConfig,
        *,
        cookies: Optional[Mapping[str, str]] = None,
        authorization: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["bxiapikey"] = config.api_key
        if authorization:
            headers["Authorization"] = authorization
        self.config = config
        self._http_client = httpx.AsyncClient(
            base_url=config.api_base_url.rstrip("/") + "/",
            headers=headers,
            cookies=dict(cookies or {}),
            timeout=config.api_timeout_seconds,
            transport=transport,
        )

    async def _get(self, path: str) -> Any:
        try:
            response = await self._http_client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Portal API returned error status",
                extra={"path": path, "status_code": e.response.status_code},
            )
            raise PortalApiError(_error_message(e.response), status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning("Portal API request failed", extra={"path": path, "error": type(e).__name__})
            raise PortalApiError(str(e) or DEFAULT_ERROR_MESSAGE) from e

        try:
            return response.json()
        except ValueError as e:
            raise PortalApiError("Portal API returned a non-JSON body", status_code=response.status_code) from e

    async def get_current_user(self) -> Optional[dict]:
        """
        Fetch the logged-in user.

        Returns:
            User payload, or None when the API answers with a falsy body
            (its "not authenticated" sentinel)
        """
        data = await self._get(LOGGED_USER_PATH)
        if not data or not isinstance(data, dict):
            return None
        return data

    async def get_owning_company(self) -> Optional[dict]:
        """Fetch the company associated with the logged-in user."""
        data = await self._get(AUTH_COMPANY_PATH)
        if not data or not isinstance(data, dict):
            return None
        return data

    async def get_company_type_name(self, company_type_id: str) -> str:
        """Fetch the human-readable company type name ("" when absent)."""
        data = await self._get(COMPANY_TYPE_PATH.format(company_type_id=company_type_id))
        if not isinstance(data, dict):
            return ""
        return str(data.get("CompanyTypeName") or data.get("stringValue") or "")

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
