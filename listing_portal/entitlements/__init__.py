"""
Listing entitlement resolution and route guarding.

This module provides:
- Catalog: fixed product/voucher categories and per-company-type grants
- Entry context: sticky arrival source / company type from query + session
- Identity: user -> company -> company type chain with soft failures
- Engine: pure (identity, arrival context) -> allowed categories/vouchers
- Guard: allow / redirect / pending decision for guarded routes
- Navigation: sidebar projection and category pickers
"""

from listing_portal.entitlements.models import (
    SELLER_HUB_PATH,
    AdminSourcePolicy,
    ArrivalContext,
    CategoryDescriptor,
    CompanyRecord,
    EffectiveEntitlement,
    Identity,
    UserRecord,
    VoucherDescriptor,
    normalize_signal,
)
from listing_portal.entitlements.catalog import (
    CompanyType,
    all_categories,
    all_vouchers,
    categories_for,
    vouchers_for,
)
from listing_portal.entitlements.entry_context import resolve_entry_context
from listing_portal.entitlements.session_store import MemoryStore, SessionStore
from listing_portal.entitlements.identity import (
    IdentityRegistry,
    IdentityResolver,
    ResolutionStage,
    run_identity_chain,
)
from listing_portal.entitlements.engine import evaluate
from listing_portal.entitlements.guard import (
    GuardDecision,
    GuardOutcome,
    ListingKind,
    check_listing_access,
)
from listing_portal.entitlements.navigation import (
    ListingPicker,
    NavigationMenu,
    build_picker,
    project_navigation,
)
from listing_portal.entitlements.seller_hub_routes import resolve_seller_hub_route

__all__ = [
    # Models
    "SELLER_HUB_PATH",
    "AdminSourcePolicy",
    "ArrivalContext",
    "CategoryDescriptor",
    "CompanyRecord",
    "EffectiveEntitlement",
    "Identity",
    "UserRecord",
    "VoucherDescriptor",
    "normalize_signal",
    # Catalog
    "CompanyType",
    "all_categories",
    "all_vouchers",
    "categories_for",
    "vouchers_for",
    # Entry context
    "resolve_entry_context",
    "MemoryStore",
    "SessionStore",
    # Identity
    "IdentityRegistry",
    "IdentityResolver",
    "ResolutionStage",
    "run_identity_chain",
    # Engine / guard / navigation
    "evaluate",
    "GuardDecision",
    "GuardOutcome",
    "ListingKind",
    "check_listing_access",
    "ListingPicker",
    "NavigationMenu",
    "build_picker",
    "project_navigation",
    "resolve_seller_hub_route",
]
