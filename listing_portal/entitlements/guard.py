"""
Listing access guard decisions.

A guarded route declares a listing kind and optionally one category slug or
voucher id. The decision is binary once identity has settled:

- identity loading       -> PENDING (render nothing, no redirect yet)
- specific id requested  -> ALLOW iff the id is in the allowed set
- picker (no id)         -> ALLOW iff the allowed set is non-empty
- otherwise              -> REDIRECT to the seller hub, replacing history
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from listing_portal.entitlements.engine import evaluate
from listing_portal.entitlements.models import (
    SELLER_HUB_PATH,
    AdminSourcePolicy,
    ArrivalContext,
    Identity,
)

logger = logging.getLogger(__name__)


class ListingKind(str, Enum):
    PRODUCT = "product"
    VOUCHER = "voucher"


class GuardOutcome(str, Enum):
    PENDING = "pending"
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    redirect_to: Optional[str] = None
    replace: bool = False

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.ALLOW


PENDING = GuardDecision(outcome=GuardOutcome.PENDING)
ALLOW = GuardDecision(outcome=GuardOutcome.ALLOW)


def check_listing_access(
    identity: Identity,
    arrival: ArrivalContext,
    kind: ListingKind,
    category: Optional[str] = None,
    policy: AdminSourcePolicy = AdminSourcePolicy.ADMIN_ONLY,
    redirect_to: str = SELLER_HUB_PATH,
) -> GuardDecision:
    """
    Decide whether a guarded listing route may render.

    Args:
        identity: Current identity snapshot
        arrival: Resolved arrival context
        kind: Listing kind the route belongs to
        category: Category slug (product) or voucher id (voucher); None for pickers
        policy: Admin source policy, same one the navigation uses
        redirect_to: Landing route for denied access

    Returns:
        GuardDecision
    """
    if identity.loading:
        return PENDING

    entitlement = evaluate(identity, arrival, policy)
    kind = ListingKind(kind)
    if kind is ListingKind.VOUCHER:
        allowed = entitlement.allows_voucher(category) if category else entitlement.has_voucher_access
    else:
        allowed = entitlement.allows_category(category) if category else entitlement.has_product_access

    if allowed:
        return ALLOW

    logger.warning(
        "Listing access denied",
        extra={
            "kind": kind.value,
            "category": category,
            "company_type": entitlement.company_type,
            "source": arrival.source,
            "authenticated": identity.is_authenticated,
        },
    )
    return GuardDecision(outcome=GuardOutcome.REDIRECT, redirect_to=redirect_to, replace=True)
