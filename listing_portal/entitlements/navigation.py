"""
Navigation projection and category pickers.

Both are display-only views of the same entitlement evaluation the guard
uses, so a menu entry is shown exactly when its route would be allowed.

One extra rule: while identity is loading and the user arrived from the
dashboard embed, every entitlement-derived entry is suppressed. Otherwise a
non-admin would briefly see the permissive pre-identity default.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from listing_portal.entitlements.engine import evaluate
from listing_portal.entitlements.guard import ListingKind
from listing_portal.entitlements.models import (
    SELLER_HUB_PATH,
    AdminSourcePolicy,
    ArrivalContext,
    EffectiveEntitlement,
    Identity,
)

ADD_PRODUCT_PATH = "/add-product"
ADD_VOUCHER_PATH = "/generalVoucherForm"

BULK_UPLOAD_ROUTES: Tuple[Tuple[str, str], ...] = (
    ("/textilebulkupload", "Textile"),
    ("/electronicbulkupload", "Electronics"),
    ("/fmcgbulkupload", "FMCG"),
    ("/officesupplybulkupload", "Office Supply"),
    ("/mobilitybulkupload", "Mobility"),
    ("/otherbulkupload", "Others"),
    ("/resturantbulkupload", "Restaurant"),
)

PRODUCT_EMPTY_MESSAGE = "Product listing is not available for your company type. Please use Voucher listing."
VOUCHER_EMPTY_MESSAGE = "Voucher listing is not available for your company type. Please use Product listing."


@dataclass(frozen=True)
class NavItem:
    path: str
    label: str
    test_id: str


@dataclass(frozen=True)
class NavSection:
    label: str
    test_id: str
    items: Tuple[NavItem, ...] = ()


@dataclass(frozen=True)
class NavigationMenu:
    seller_hub: NavItem
    add_listing: NavSection
    add_voucher: Optional[NavItem]
    bulk_upload: Optional[NavSection]
    product_categories: Tuple[NavItem, ...]
    normal_user_view: bool
    suppressed: bool = False


def _test_id(prefix: str, label: str) -> str:
    return f"{prefix}-{label.lower().replace('/', '-')}"


def _category_items(entitlement: EffectiveEntitlement) -> Tuple[NavItem, ...]:
    return tuple(
        NavItem(path=category.path, label=category.label, test_id=_test_id("nav-add", category.label))
        for category in entitlement.allowed_categories
    )


def project_navigation(
    identity: Identity,
    arrival: ArrivalContext,
    policy: AdminSourcePolicy = AdminSourcePolicy.ADMIN_ONLY,
    seller_hub_path: str = SELLER_HUB_PATH,
) -> NavigationMenu:
    """Build the sidebar menu for the current identity and arrival context."""
    entitlement = evaluate(identity, arrival, policy)
    suppressed = arrival.from_dashboard and identity.loading
    normal_user_view = not entitlement.admin_all

    product_categories = () if suppressed else _category_items(entitlement)
    has_product_access = entitlement.has_product_access and not suppressed
    has_voucher_access = entitlement.has_voucher_access and not suppressed

    if normal_user_view:
        options = []
        if has_product_access:
            options.append(NavItem(ADD_PRODUCT_PATH, "Product", "nav-add-product-option"))
        if has_voucher_access:
            options.append(NavItem(ADD_VOUCHER_PATH, "Voucher", "nav-add-voucher-option"))
        add_listing = NavSection(label="Add Listing", test_id="nav-add-product", items=tuple(options))
        add_voucher = None
    else:
        add_listing = NavSection(label="Add Product", test_id="nav-add-product", items=product_categories)
        add_voucher = NavItem(ADD_VOUCHER_PATH, "Add Voucher", "nav-add-voucher")

    bulk_upload = None
    if not suppressed and (entitlement.admin_all or has_product_access):
        bulk_upload = NavSection(
            label="Bulk Upload",
            test_id="nav-bulk-upload",
            items=tuple(NavItem(path, label, _test_id("nav-bulk", label)) for path, label in BULK_UPLOAD_ROUTES),
        )

    return NavigationMenu(
        seller_hub=NavItem(seller_hub_path, "Products Uploaded", "nav-sellerhub"),
        add_listing=add_listing,
        add_voucher=add_voucher,
        bulk_upload=bulk_upload,
        product_categories=product_categories,
        normal_user_view=normal_user_view,
        suppressed=suppressed,
    )


@dataclass(frozen=True)
class PickerOption:
    id: str
    label: str
    path: str


@dataclass(frozen=True)
class ListingPicker:
    kind: ListingKind
    title: str
    subtitle: str
    options: Tuple[PickerOption, ...]
    empty_message: Optional[str]
    loading: bool = False
    admin_all: bool = False


def build_picker(
    identity: Identity,
    arrival: ArrivalContext,
    kind: ListingKind,
    policy: AdminSourcePolicy = AdminSourcePolicy.ADMIN_ONLY,
) -> ListingPicker:
    """
    Build the category/voucher chooser for a picker route.

    An empty option list always carries an explicit empty-state message.
    """
    kind = ListingKind(kind)
    entitlement = evaluate(identity, arrival, policy)
    admin_all = entitlement.admin_all

    if kind is ListingKind.VOUCHER:
        options = tuple(PickerOption(v.id, v.label, v.path) for v in entitlement.allowed_vouchers)
        title = "Choose any voucher (Admin)" if admin_all else "Add Voucher"
        subtitle = (
            "You can add a voucher in any of the categories below."
            if admin_all
            else "Select a category to add your voucher."
        )
        empty_message = VOUCHER_EMPTY_MESSAGE
    else:
        options = tuple(PickerOption(c.slug, c.label, c.path) for c in entitlement.allowed_categories)
        title = "Choose any category (Admin)" if admin_all else "Add Product"
        subtitle = (
            "You can add a product or media in any of the categories below."
            if admin_all
            else "Select a category to add your product."
        )
        empty_message = PRODUCT_EMPTY_MESSAGE

    if identity.loading:
        return ListingPicker(kind=kind, title=title, subtitle=subtitle, options=(), empty_message=None, loading=True)

    return ListingPicker(
        kind=kind,
        title=title,
        subtitle=subtitle,
        options=options,
        empty_message=None if options else empty_message,
        admin_all=admin_all,
    )
