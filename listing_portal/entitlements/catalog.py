"""
Static entitlement catalog for product and voucher listings.

Defines the fixed universe of listing categories (10 product/media
categories, 11 voucher categories) and which of them each company type may
use. Administrators get the full catalog; unknown company types fall back
to the DEFAULT grant, which is fail-open (every category, every voucher).

Company types are a closed enum so the fallback is an explicit branch
(CompanyType.from_name) instead of an implicit dict miss.
"""

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Tuple, Union

from listing_portal.entitlements.models import CategoryDescriptor, VoucherDescriptor


ALL_PRODUCT_CATEGORIES: Tuple[CategoryDescriptor, ...] = (
    CategoryDescriptor("textile", "Textile", "/textile/general-info"),
    CategoryDescriptor("electronics", "Electronics", "/electronics/general-info"),
    CategoryDescriptor("fmcg", "FMCG", "/fmcg/general-info"),
    CategoryDescriptor("officesupply", "Office Supply", "/officesupply/general-info"),
    CategoryDescriptor("lifestyle", "Lifestyle", "/lifestyle/general-info"),
    CategoryDescriptor("mobility", "Mobility", "/mobility/general-info"),
    CategoryDescriptor("restaurant", "Restaurant / QSR", "/restaurant/general-info"),
    CategoryDescriptor("others", "Others", "/others/general-info"),
    CategoryDescriptor("mediaonline", "Media Online", "/mediaonline/general-info"),
    CategoryDescriptor("mediaoffline", "Media Offline", "/mediaoffline/general-info"),
)

ALL_VOUCHER_CATEGORIES: Tuple[VoucherDescriptor, ...] = (
    VoucherDescriptor("electronicsVoucher", "Electronics Voucher", "/electronicsVoucher/generalinformation"),
    VoucherDescriptor("fmcgVoucher", "FMCG Voucher", "/fmcgVoucher/generalinformation"),
    VoucherDescriptor("mobilityVoucher", "Mobility Voucher", "/mobilityVoucher/generalinformation"),
    VoucherDescriptor("officesupplyVoucher", "Office Supply Voucher", "/officesupplyVoucher/generalinformation"),
    VoucherDescriptor("eeVoucher", "Entertainment & Events Voucher", "/eeVoucher/generalinformation"),
    VoucherDescriptor("textileVoucher", "Textile Voucher", "/textileVoucher/generalinformation"),
    VoucherDescriptor("lifestyleVoucher", "Lifestyle Voucher", "/lifestyleVoucher/generalinformation"),
    VoucherDescriptor("airlineVoucher", "Airline Voucher", "/airlineVoucher/generalinformation"),
    VoucherDescriptor("qsrVoucher", "QSR Voucher", "/qsrVoucher/generalinformation"),
    VoucherDescriptor("hotelsVoucher", "Hotels Voucher", "/hotelsVoucher/generalinformation"),
    VoucherDescriptor("otherVoucher", "Other Voucher", "/otherVoucher/generalinformation"),
)

# Placeholder used when neither identity nor arrival context names a type.
FALLBACK_COMPANY_TYPE = "Others"


class CompanyType(str, Enum):
    """
    Known seller lines of business, keyed by the remote CompanyTypeName.

    DEFAULT covers every name not listed here.
    """
    TEXTILE = "Textile"
    ELECTRONICS = "Electronics"
    FMCG = "FMCG"
    OFFICE_SUPPLY = "Office Supply"
    LIFESTYLE = "Lifestyle"
    MOBILITY = "Mobility"
    QSR = "QSR"
    OTHERS = "Others"
    MEDIA = "Media"
    ENTERTAINMENT_EVENTS = "Entertainment & Events"
    HOTEL = "Hotel"
    HOTELS = "Hotels"
    AIRLINE_TICKETS = "Airline Tickets"
    AIRLINES_TICKETS = "Airlines Tickets"
    DEFAULT = "default"

    @classmethod
    def from_name(cls, name: Union[str, "CompanyType", None]) -> "CompanyType":
        if isinstance(name, CompanyType):
            return name
        normalized = str(name or "").strip()
        for member in cls:
            if member is not cls.DEFAULT and member.value == normalized:
                return member
        return cls.DEFAULT


def _frozen(mapping: Mapping[CompanyType, Iterable[str]]) -> Mapping[CompanyType, FrozenSet[str]]:
    return MappingProxyType({key: frozenset(values) for key, values in mapping.items()})


ALLOWED_CATEGORIES_BY_COMPANY_TYPE: Mapping[CompanyType, FrozenSet[str]] = _frozen({
    CompanyType.TEXTILE: ["textile"],
    CompanyType.ELECTRONICS: ["electronics"],
    CompanyType.FMCG: ["fmcg"],
    CompanyType.OFFICE_SUPPLY: ["officesupply"],
    CompanyType.LIFESTYLE: ["lifestyle"],
    CompanyType.MOBILITY: ["mobility"],
    CompanyType.QSR: ["restaurant"],
    CompanyType.OTHERS: ["others"],
    CompanyType.MEDIA: ["mediaonline", "mediaoffline"],
    CompanyType.ENTERTAINMENT_EVENTS: [],
    CompanyType.HOTEL: [],
    CompanyType.HOTELS: [],
    CompanyType.AIRLINE_TICKETS: [],
    CompanyType.AIRLINES_TICKETS: [],
    CompanyType.DEFAULT: [category.slug for category in ALL_PRODUCT_CATEGORIES],
})

ALLOWED_VOUCHERS_BY_COMPANY_TYPE: Mapping[CompanyType, FrozenSet[str]] = _frozen({
    CompanyType.TEXTILE: ["textileVoucher"],
    CompanyType.ELECTRONICS: ["electronicsVoucher"],
    CompanyType.FMCG: ["fmcgVoucher"],
    CompanyType.OFFICE_SUPPLY: ["officesupplyVoucher"],
    CompanyType.LIFESTYLE: ["lifestyleVoucher"],
    CompanyType.MOBILITY: ["mobilityVoucher"],
    CompanyType.QSR: ["qsrVoucher"],
    CompanyType.OTHERS: ["otherVoucher"],
    CompanyType.HOTEL: ["hotelsVoucher"],
    CompanyType.HOTELS: ["hotelsVoucher"],
    CompanyType.AIRLINE_TICKETS: ["airlineVoucher"],
    CompanyType.AIRLINES_TICKETS: ["airlineVoucher"],
    CompanyType.ENTERTAINMENT_EVENTS: ["eeVoucher"],
    CompanyType.MEDIA: [],
    CompanyType.DEFAULT: [voucher.id for voucher in ALL_VOUCHER_CATEGORIES],
})


def _validate_catalog() -> None:
    """Every granted slug/id must exist in the fixed catalog."""
    slugs = {category.slug for category in ALL_PRODUCT_CATEGORIES}
    voucher_ids = {voucher.id for voucher in ALL_VOUCHER_CATEGORIES}
    for company_type, granted in ALLOWED_CATEGORIES_BY_COMPANY_TYPE.items():
        dangling = granted - slugs
        if dangling:
            raise ValueError(f"{company_type.value} grants unknown categories: {sorted(dangling)}")
    for company_type, granted in ALLOWED_VOUCHERS_BY_COMPANY_TYPE.items():
        dangling = granted - voucher_ids
        if dangling:
            raise ValueError(f"{company_type.value} grants unknown vouchers: {sorted(dangling)}")
    if CompanyType.DEFAULT not in ALLOWED_CATEGORIES_BY_COMPANY_TYPE:
        raise ValueError("category map must define a default entry")
    if CompanyType.DEFAULT not in ALLOWED_VOUCHERS_BY_COMPANY_TYPE:
        raise ValueError("voucher map must define a default entry")


_validate_catalog()


def all_categories() -> Tuple[CategoryDescriptor, ...]:
    return ALL_PRODUCT_CATEGORIES


def all_vouchers() -> Tuple[VoucherDescriptor, ...]:
    return ALL_VOUCHER_CATEGORIES


def categories_for(
    company_type: Union[str, CompanyType, None],
    is_admin: bool,
) -> Tuple[CategoryDescriptor, ...]:
    """
    Product/media categories a company type may list under.

    Args:
        company_type: CompanyTypeName (free string) or CompanyType
        is_admin: True returns the full catalog regardless of company_type

    Returns:
        Catalog-ordered subset of ALL_PRODUCT_CATEGORIES (possibly empty)
    """
    if is_admin:
        return ALL_PRODUCT_CATEGORIES
    slugs = ALLOWED_CATEGORIES_BY_COMPANY_TYPE[CompanyType.from_name(company_type)]
    return tuple(category for category in ALL_PRODUCT_CATEGORIES if category.slug in slugs)


def vouchers_for(
    company_type: Union[str, CompanyType, None],
    is_admin: bool,
) -> Tuple[VoucherDescriptor, ...]:
    """Voucher categories a company type may list under (catalog order)."""
    if is_admin:
        return ALL_VOUCHER_CATEGORIES
    voucher_ids = ALLOWED_VOUCHERS_BY_COMPANY_TYPE[CompanyType.from_name(company_type)]
    return tuple(voucher for voucher in ALL_VOUCHER_CATEGORIES if voucher.id in voucher_ids)


def find_category(slug: str) -> Union[CategoryDescriptor, None]:
    for category in ALL_PRODUCT_CATEGORIES:
        if category.slug == slug:
            return category
    return None


def find_voucher(voucher_id: str) -> Union[VoucherDescriptor, None]:
    for voucher in ALL_VOUCHER_CATEGORIES:
        if voucher.id == voucher_id:
            return voucher
    return None
