"""
Tests for the static listing catalog and per-company-type grants.
"""

import pytest

from listing_portal.entitlements.catalog import (
    ALL_PRODUCT_CATEGORIES,
    ALL_VOUCHER_CATEGORIES,
    ALLOWED_CATEGORIES_BY_COMPANY_TYPE,
    ALLOWED_VOUCHERS_BY_COMPANY_TYPE,
    CompanyType,
    categories_for,
    find_category,
    find_voucher,
    vouchers_for,
)


def _slugs(categories):
    return [category.slug for category in categories]


def _ids(vouchers):
    return [voucher.id for voucher in vouchers]


class TestCatalogUniverse:
    """The fixed category and voucher lists."""

    def test_ten_product_categories_in_order(self):
        assert _slugs(ALL_PRODUCT_CATEGORIES) == [
            "textile",
            "electronics",
            "fmcg",
            "officesupply",
            "lifestyle",
            "mobility",
            "restaurant",
            "others",
            "mediaonline",
            "mediaoffline",
        ]

    def test_eleven_voucher_categories(self):
        assert len(ALL_VOUCHER_CATEGORIES) == 11
        assert "hotelsVoucher" in _ids(ALL_VOUCHER_CATEGORIES)
        assert "eeVoucher" in _ids(ALL_VOUCHER_CATEGORIES)

    def test_slugs_and_ids_unique(self):
        assert len(set(_slugs(ALL_PRODUCT_CATEGORIES))) == len(ALL_PRODUCT_CATEGORIES)
        assert len(set(_ids(ALL_VOUCHER_CATEGORIES))) == len(ALL_VOUCHER_CATEGORIES)

    def test_every_grant_references_catalog(self):
        slugs = set(_slugs(ALL_PRODUCT_CATEGORIES))
        voucher_ids = set(_ids(ALL_VOUCHER_CATEGORIES))
        for granted in ALLOWED_CATEGORIES_BY_COMPANY_TYPE.values():
            assert granted <= slugs
        for granted in ALLOWED_VOUCHERS_BY_COMPANY_TYPE.values():
            assert granted <= voucher_ids

    def test_grant_tables_are_read_only(self):
        with pytest.raises(TypeError):
            ALLOWED_CATEGORIES_BY_COMPANY_TYPE[CompanyType.TEXTILE] = frozenset({"fmcg"})

    def test_find_helpers(self):
        assert find_category("textile").label == "Textile"
        assert find_category("nope") is None
        assert find_voucher("qsrVoucher").path == "/qsrVoucher/generalinformation"
        assert find_voucher("nope") is None


class TestCompanyTypeLookup:
    """CompanyType.from_name maps free strings onto the closed enum."""

    @pytest.mark.parametrize("name", ["Hotel", "Hotels", "Media", "Entertainment & Events", "QSR"])
    def test_known_names(self, name):
        assert CompanyType.from_name(name).value == name

    @pytest.mark.parametrize("name", ["", None, "Spaceships", "textile"])
    def test_unknown_names_map_to_default(self, name):
        assert CompanyType.from_name(name) is CompanyType.DEFAULT

    def test_surrounding_whitespace_ignored(self):
        assert CompanyType.from_name("  Mobility ") is CompanyType.MOBILITY


class TestGrants:
    """categories_for / vouchers_for per company type."""

    @pytest.mark.parametrize("company_type", [t for t in CompanyType if t is not CompanyType.DEFAULT])
    def test_grants_match_tables_in_catalog_order(self, company_type):
        categories = categories_for(company_type.value, False)
        vouchers = vouchers_for(company_type.value, False)

        assert set(_slugs(categories)) == ALLOWED_CATEGORIES_BY_COMPANY_TYPE[company_type]
        assert set(_ids(vouchers)) == ALLOWED_VOUCHERS_BY_COMPANY_TYPE[company_type]
        positions = [ALL_PRODUCT_CATEGORIES.index(c) for c in categories]
        assert positions == sorted(positions)

    def test_media_gets_both_media_categories_and_no_vouchers(self):
        assert _slugs(categories_for("Media", False)) == ["mediaonline", "mediaoffline"]
        assert vouchers_for("Media", False) == ()

    def test_entertainment_events_is_voucher_only(self):
        assert categories_for("Entertainment & Events", False) == ()
        assert _ids(vouchers_for("Entertainment & Events", False)) == ["eeVoucher"]

    def test_qsr_maps_to_restaurant(self):
        assert _slugs(categories_for("QSR", False)) == ["restaurant"]
        assert _ids(vouchers_for("QSR", False)) == ["qsrVoucher"]

    @pytest.mark.parametrize("name", ["Hotel", "Hotels"])
    def test_hotel_aliases_share_grants(self, name):
        assert categories_for(name, False) == ()
        assert _ids(vouchers_for(name, False)) == ["hotelsVoucher"]

    @pytest.mark.parametrize("name", ["Airline Tickets", "Airlines Tickets"])
    def test_airline_aliases_share_grants(self, name):
        assert categories_for(name, False) == ()
        assert _ids(vouchers_for(name, False)) == ["airlineVoucher"]

    def test_unknown_type_is_fail_open(self):
        assert categories_for("Spaceships", False) == ALL_PRODUCT_CATEGORIES
        assert vouchers_for("Spaceships", False) == ALL_VOUCHER_CATEGORIES

    def test_admin_gets_everything_regardless_of_type(self):
        assert categories_for("Textile", True) == ALL_PRODUCT_CATEGORIES
        assert vouchers_for("Media", True) == ALL_VOUCHER_CATEGORIES

    def test_results_follow_catalog_order(self):
        categories = categories_for("Spaceships", False)
        assert list(categories) == list(ALL_PRODUCT_CATEGORIES)
