"""
Entitlement evaluation: (identity, arrival context, policy) -> allowed sets.

Precedence:
- company type: identity company type -> arrival company type -> "Others"
- admin-all: identity.is_admin AND policy admits the arrival source
- a settled authentication failure grants nothing
"""

from listing_portal.entitlements.catalog import FALLBACK_COMPANY_TYPE, categories_for, vouchers_for
from listing_portal.entitlements.models import (
    AdminSourcePolicy,
    ArrivalContext,
    EffectiveEntitlement,
    Identity,
)


def effective_company_type(identity: Identity, arrival: ArrivalContext) -> str:
    return identity.company_type_name or arrival.company_type or FALLBACK_COMPANY_TYPE


def allow_admin_all(
    identity: Identity,
    arrival: ArrivalContext,
    policy: AdminSourcePolicy = AdminSourcePolicy.ADMIN_ONLY,
) -> bool:
    return identity.is_admin and AdminSourcePolicy(policy).admits(arrival.source)


def evaluate(
    identity: Identity,
    arrival: ArrivalContext,
    policy: AdminSourcePolicy = AdminSourcePolicy.ADMIN_ONLY,
) -> EffectiveEntitlement:
    """Compute a fresh EffectiveEntitlement. Pure; never raises."""
    company_type = effective_company_type(identity, arrival)
    if identity.error and not identity.loading:
        return EffectiveEntitlement(allowed_categories=(), allowed_vouchers=(), company_type=company_type)

    admin_all = allow_admin_all(identity, arrival, policy)
    return EffectiveEntitlement(
        allowed_categories=categories_for(company_type, admin_all),
        allowed_vouchers=vouchers_for(company_type, admin_all),
        company_type=company_type,
        admin_all=admin_all,
    )
