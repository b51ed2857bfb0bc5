"""
Tests for entitlement evaluation.
"""

from listing_portal.entitlements.engine import allow_admin_all, effective_company_type, evaluate
from listing_portal.entitlements.models import AdminSourcePolicy, ArrivalContext, Identity
from tests.fakes import make_identity


def _slugs(entitlement):
    return [category.slug for category in entitlement.allowed_categories]


def _voucher_ids(entitlement):
    return [voucher.id for voucher in entitlement.allowed_vouchers]


class TestEffectiveCompanyType:
    """identity -> arrival -> "Others"."""

    def test_identity_wins(self):
        identity = make_identity(company_type="Textile")
        assert effective_company_type(identity, ArrivalContext(company_type="Media")) == "Textile"

    def test_arrival_used_when_identity_has_none(self):
        identity = make_identity(company_type="")
        assert effective_company_type(identity, ArrivalContext(company_type="Media")) == "Media"

    def test_falls_back_to_others(self):
        assert effective_company_type(make_identity(), ArrivalContext()) == "Others"

    def test_loading_identity_uses_arrival(self):
        assert effective_company_type(Identity.pending(), ArrivalContext(company_type="FMCG")) == "FMCG"


class TestAdminAll:
    """Admin override requires both the admin flag and an admitted source."""

    def test_admin_from_admin_source(self):
        assert allow_admin_all(make_identity(is_admin=True), ArrivalContext(source="admin"))

    def test_admin_from_dashboard_is_filtered(self):
        assert not allow_admin_all(make_identity(is_admin=True), ArrivalContext(source="dashboard"))

    def test_admin_without_source_under_admin_only(self):
        assert not allow_admin_all(make_identity(is_admin=True), ArrivalContext())

    def test_admin_without_source_under_non_dashboard(self):
        assert allow_admin_all(
            make_identity(is_admin=True),
            ArrivalContext(),
            AdminSourcePolicy.NON_DASHBOARD,
        )

    def test_non_admin_never_admin_all(self):
        assert not allow_admin_all(
            make_identity(is_admin=False),
            ArrivalContext(source="admin"),
            AdminSourcePolicy.NON_DASHBOARD,
        )


class TestEvaluate:
    """evaluate() end to end."""

    def test_textile_seller(self):
        entitlement = evaluate(make_identity(company_type="Textile"), ArrivalContext())
        assert _slugs(entitlement) == ["textile"]
        assert _voucher_ids(entitlement) == ["textileVoucher"]
        assert entitlement.company_type == "Textile"
        assert not entitlement.admin_all

    def test_admin_override_with_admin_source(self):
        entitlement = evaluate(
            make_identity(company_type="Textile", is_admin=True),
            ArrivalContext(source="admin"),
        )
        assert entitlement.admin_all
        assert len(entitlement.allowed_categories) == 10
        assert len(entitlement.allowed_vouchers) == 11

    def test_admin_on_dashboard_gets_company_grants(self):
        entitlement = evaluate(
            make_identity(company_type="Media", is_admin=True),
            ArrivalContext(source="dashboard"),
        )
        assert not entitlement.admin_all
        assert _slugs(entitlement) == ["mediaonline", "mediaoffline"]
        assert _voucher_ids(entitlement) == []

    def test_loading_identity_uses_arrival_company_type(self):
        entitlement = evaluate(Identity.pending(), ArrivalContext(company_type="Mobility"))
        assert _slugs(entitlement) == ["mobility"]

    def test_authentication_failure_grants_nothing(self):
        identity = make_identity(error="Not authenticated", authenticated=False)
        entitlement = evaluate(identity, ArrivalContext(company_type="Textile"))
        assert entitlement.allowed_categories == ()
        assert entitlement.allowed_vouchers == ()
        assert not entitlement.has_product_access

    def test_soft_failure_keeps_arrival_type(self):
        # Company lookup failed: user kept, no type name.
        identity = make_identity(company_type="")
        entitlement = evaluate(identity, ArrivalContext(company_type="QSR"))
        assert _slugs(entitlement) == ["restaurant"]

    def test_fresh_value_each_call(self):
        identity = make_identity(company_type="FMCG")
        first = evaluate(identity, ArrivalContext())
        second = evaluate(identity, ArrivalContext())
        assert first == second
        assert first is not second
