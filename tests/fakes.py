"""
Fakes for the portal API and identity snapshots.

The remote portal API is faked with httpx.MockTransport so the real
PortalClient code path (headers, status handling, JSON decoding) runs.
"""

from typing import Any, Dict, List, Optional

import httpx

from listing_portal.entitlements.models import (
    CompanyRecord,
    Identity,
    UserRecord,
)

PORTAL_URL = "http://portal.test"


class FakePortal:
    """In-memory stand-in for the portal's auth and company type endpoints."""

    def __init__(
        self,
        user: Any = None,
        company: Any = None,
        company_type_name: str = "",
        user_status: int = 200,
        company_status: int = 200,
        company_type_status: int = 200,
        error_message: Optional[str] = None,
    ):
        self.user = user
        self.company = company
        self.company_type_name = company_type_name
        self.user_status = user_status
        self.company_status = company_status
        self.company_type_status = company_type_status
        self.error_message = error_message
        self.requests: List[httpx.Request] = []

    def _error(self, status_code: int) -> httpx.Response:
        body = {"message": self.error_message} if self.error_message else {}
        return httpx.Response(status_code, json=body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/logged_user":
            if self.user_status != 200:
                return self._error(self.user_status)
            return httpx.Response(200, json=self.user if self.user else False)

        if path == "/auth/getauthsCompany":
            if self.company_status != 200:
                return self._error(self.company_status)
            return httpx.Response(200, json=self.company if self.company else False)

        if path.startswith("/company_type/get_companyType/"):
            if self.company_type_status != 200:
                return self._error(self.company_type_status)
            return httpx.Response(200, json={"CompanyTypeName": self.company_type_name})

        return httpx.Response(404, json={"message": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


def seller_user(**overrides) -> Dict[str, Any]:
    payload = {"_id": "user-1", "companyId": "company-1", "superAdmin": False, "roleName": "SELLER"}
    payload.update(overrides)
    return payload


def admin_user(**overrides) -> Dict[str, Any]:
    return seller_user(_id="admin-1", superAdmin=True, **overrides)


def company(company_type: Optional[str] = "type-1") -> Dict[str, Any]:
    return {"_id": "company-1", "companyName": "Acme Traders", "companyType": company_type}


def make_identity(
    company_type: str = "",
    is_admin: bool = False,
    loading: bool = False,
    error: Optional[str] = None,
    authenticated: bool = True,
) -> Identity:
    """Settled (or loading) identity snapshot for pure engine tests."""
    user = None
    company_record = None
    if authenticated and error is None:
        user = UserRecord(user_id="user-1", super_admin=is_admin)
        company_record = CompanyRecord(company_id="company-1", company_type_id="type-1")
    return Identity(
        user=user,
        company=company_record,
        company_type_name=company_type,
        is_admin=is_admin,
        loading=loading,
        error=error,
    )
