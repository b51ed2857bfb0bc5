from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

SELLER_HUB_PATH = "/sellerhub"

DASHBOARD_SOURCE = "dashboard"
ADMIN_SOURCE = "admin"
ADMIN_ROLE_NAME = "ADMIN"

_SENTINEL_VALUES = frozenset({"undefined", "null"})


def normalize_signal(value: Any) -> str:
    """Trim a navigational value; empty and sentinel text collapse to ""."""
    if value is None:
        return ""
    normalized = str(value).strip()
    if not normalized:
        return ""
    if normalized.lower() in _SENTINEL_VALUES:
        return ""
    return normalized


class AdminSourcePolicy(str, Enum):
    """
    Which arrival sources let an administrator see the unfiltered catalog.

    - admin_only: only source == "admin"
    - non_dashboard: any source other than "dashboard" (including none)
    """
    ADMIN_ONLY = "admin_only"
    NON_DASHBOARD = "non_dashboard"

    def admits(self, source: str) -> bool:
        if self is AdminSourcePolicy.NON_DASHBOARD:
            return source != DASHBOARD_SOURCE
        return source == ADMIN_SOURCE


@dataclass(frozen=True)
class CategoryDescriptor:
    slug: str
    label: str
    path: str


@dataclass(frozen=True)
class VoucherDescriptor:
    id: str
    label: str
    path: str


@dataclass(frozen=True)
class ArrivalContext:
    """Arrival source and company type; "" means not supplied."""

    source: str = ""
    company_type: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", normalize_signal(self.source))
        object.__setattr__(self, "company_type", normalize_signal(self.company_type))

    @property
    def from_dashboard(self) -> bool:
        return self.source == DASHBOARD_SOURCE


@dataclass(frozen=True)
class UserRecord:
    """Logged-in user as returned by auth/logged_user."""

    user_id: str
    company_id: Optional[str] = None
    super_admin: bool = False
    role_name: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", MappingProxyType(dict(self.raw)))

    @property
    def is_admin(self) -> bool:
        return self.super_admin is True or self.role_name == ADMIN_ROLE_NAME

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserRecord":
        return cls(
            user_id=str(payload.get("_id") or payload.get("id") or ""),
            company_id=payload.get("companyId"),
            super_admin=payload.get("superAdmin") is True,
            role_name=str(payload.get("roleName") or ""),
            raw=payload,
        )


@dataclass(frozen=True)
class CompanyRecord:
    """Company owned by the logged-in user (auth/getauthsCompany)."""

    company_id: str
    company_type_id: Optional[str] = None
    name: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", MappingProxyType(dict(self.raw)))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CompanyRecord":
        company_type = payload.get("companyType")
        return cls(
            company_id=str(payload.get("_id") or payload.get("id") or ""),
            company_type_id=str(company_type) if company_type else None,
            name=str(payload.get("companyName") or ""),
            raw=payload,
        )


@dataclass(frozen=True)
class Identity:
    """Snapshot of the identity chain user -> company -> company type name."""

    user: Optional[UserRecord] = None
    company: Optional[CompanyRecord] = None
    company_type_name: str = ""
    is_admin: bool = False
    loading: bool = False
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @classmethod
    def pending(cls) -> "Identity":
        return cls(loading=True)


@dataclass(frozen=True)
class EffectiveEntitlement:
    """Allowed categories and vouchers for one evaluation. Never cached."""

    allowed_categories: Tuple[CategoryDescriptor, ...]
    allowed_vouchers: Tuple[VoucherDescriptor, ...]
    company_type: str
    admin_all: bool = False

    def allows_category(self, slug: str) -> bool:
        return any(category.slug == slug for category in self.allowed_categories)

    def allows_voucher(self, voucher_id: str) -> bool:
        return any(voucher.id == voucher_id for voucher in self.allowed_vouchers)

    @property
    def has_product_access(self) -> bool:
        return len(self.allowed_categories) > 0

    @property
    def has_voucher_access(self) -> bool:
        return len(self.allowed_vouchers) > 0
