"""
Entitlement read-accessor schemas.

Field names serialize as camelCase to match what the single-page app
already consumes (allowedCategories, companyType, ...).
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from listing_portal.entitlements.models import EffectiveEntitlement, Identity
from listing_portal.entitlements.navigation import ListingPicker, NavigationMenu, NavItem, NavSection


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryOut(CamelModel):
    slug: str
    label: str
    path: str


class VoucherOut(CamelModel):
    id: str
    label: str
    path: str


class EntryContextResponse(CamelModel):
    source: str
    company_type: str


class EntitlementsResponse(CamelModel):
    allowed_categories: List[CategoryOut]
    allowed_vouchers: List[VoucherOut]
    company_type: str
    admin_all: bool
    loading: bool

    @classmethod
    def from_entitlement(cls, entitlement: EffectiveEntitlement, loading: bool) -> "EntitlementsResponse":
        return cls(
            allowed_categories=[CategoryOut(slug=c.slug, label=c.label, path=c.path) for c in entitlement.allowed_categories],
            allowed_vouchers=[VoucherOut(id=v.id, label=v.label, path=v.path) for v in entitlement.allowed_vouchers],
            company_type=entitlement.company_type,
            admin_all=entitlement.admin_all,
            loading=loading,
        )


class IdentityResponse(CamelModel):
    is_authenticated: bool
    is_admin: bool
    user_id: Optional[str] = None
    company_id: Optional[str] = None
    company_type: str
    loading: bool
    error: Optional[str] = None

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityResponse":
        return cls(
            is_authenticated=identity.is_authenticated,
            is_admin=identity.is_admin,
            user_id=identity.user.user_id if identity.user else None,
            company_id=identity.company.company_id if identity.company else None,
            company_type=identity.company_type_name,
            loading=identity.loading,
            error=identity.error,
        )


class NavItemOut(CamelModel):
    path: str
    label: str
    test_id: str


class NavSectionOut(CamelModel):
    label: str
    test_id: str
    items: List[NavItemOut]


def _item(item: NavItem) -> NavItemOut:
    return NavItemOut(path=item.path, label=item.label, test_id=item.test_id)


def _section(section: NavSection) -> NavSectionOut:
    return NavSectionOut(label=section.label, test_id=section.test_id, items=[_item(i) for i in section.items])


class NavigationResponse(CamelModel):
    seller_hub: NavItemOut
    add_listing: NavSectionOut
    add_voucher: Optional[NavItemOut] = None
    bulk_upload: Optional[NavSectionOut] = None
    product_categories: List[NavItemOut]
    normal_user_view: bool
    suppressed: bool

    @classmethod
    def from_menu(cls, menu: NavigationMenu) -> "NavigationResponse":
        return cls(
            seller_hub=_item(menu.seller_hub),
            add_listing=_section(menu.add_listing),
            add_voucher=_item(menu.add_voucher) if menu.add_voucher else None,
            bulk_upload=_section(menu.bulk_upload) if menu.bulk_upload else None,
            product_categories=[_item(i) for i in menu.product_categories],
            normal_user_view=menu.normal_user_view,
            suppressed=menu.suppressed,
        )


class PickerOptionOut(CamelModel):
    id: str
    label: str
    path: str


class PickerResponse(CamelModel):
    kind: str
    title: str
    subtitle: str
    options: List[PickerOptionOut]
    empty_message: Optional[str] = None
    loading: bool
    admin_all: bool

    @classmethod
    def from_picker(cls, picker: ListingPicker) -> "PickerResponse":
        return cls(
            kind=picker.kind.value,
            title=picker.title,
            subtitle=picker.subtitle,
            options=[PickerOptionOut(id=o.id, label=o.label, path=o.path) for o in picker.options],
            empty_message=picker.empty_message,
            loading=picker.loading,
            admin_all=picker.admin_all,
        )


class SellerHubRouteRequest(CamelModel):
    product: Dict[str, Any] = Field(default_factory=dict)
    action: str
    company_type: Optional[str] = None
    review_reason_navigation: Optional[str] = None


class SellerHubRouteResponse(CamelModel):
    path: str
