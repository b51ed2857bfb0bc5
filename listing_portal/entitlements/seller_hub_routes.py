"""
Seller Hub edit/view route resolution.

Maps a listed product (or voucher) plus the seller's company type to the
wizard route that edits it or the preview route that displays it.
"""

import logging
from typing import Any, Mapping, Optional

from listing_portal.entitlements.models import SELLER_HUB_PATH

logger = logging.getLogger(__name__)

PRODUCT_ROUTES = {
    "Textile": "/textile",
    "Electronics": "/electronics",
    "FMCG": "/fmcg",
    "Office Supply": "/officesupply",
    "Lifestyle": "/lifestyle",
    "Mobility": "/mobility",
    "Others": "/others",
    "QSR": "/restaurant",
    "Hotel": "/hotelsVoucher",
    "Airline Tickets": "/airlineVoucher",
    "Entertainment & Events": "/eeVoucher",
}

VOUCHER_ROUTES = {
    "Textile": "/textileVoucher",
    "Electronics": "/electronicsVoucher",
    "FMCG": "/fmcgVoucher",
    "Office Supply": "/officesupplyVoucher",
    "Lifestyle": "/lifestyleVoucher",
    "Mobility": "/mobilityVoucher",
    "Others": "/otherVoucher",
    "QSR": "/qsrVoucher",
    "Hotel": "/hotelsVoucher",
    "Airline Tickets": "/airlineVoucher",
    "Entertainment & Events": "/eeVoucher",
}

PREVIEW_ROUTES = {
    "Textile": "/textilepreviewpage",
    "Electronics": "/electronicsproductpreview",
    "FMCG": "/fmcgproductpreview",
    "Office Supply": "/allproductpreview",
    "Lifestyle": "/allproductpreview",
    "Mobility": "/mobilityproductpreview",
    "Others": "/allproductpreview",
    "QSR": "/RestaurantProductPreview",
    "Hotel": "/allvoucherpreview",
    "Media": "/mediaonlineproductpreview",
}

STEP_ROUTES = {
    "generalinformation": "/general-info",
    "productinformation": "/product-info",
    "technicalinformation": "/tech-info",
    "golive": "/go-live",
}

HOTEL_VOUCHER_STEP_ROUTES = {
    "generalinformation": "/generalinformation",
    "productinformation": "/hotelsproductinfo",
    "technicalinformation": "/hotelstechinfo",
    "golive": "/hotelsgolive",
}

# Product wizard step -> voucher wizard step (vouchers are one step ahead).
VOUCHER_STEP_ROUTES = {
    "/general-info": "/generalinformation",
    "/product-info": "/techinfo",
    "/tech-info": "/golive",
    "/go-live": "/voucherdesign",
}

DIGITAL_SCREEN_STEPS = {
    "productinformation": "mediaonlinedigitalscreensinfo",
    "technicalinformation": "mediaonlinedigitalscreenstechinfo",
    "golive": "digitalscreensgolive",
}

MULTIPLEX_STEPS = {
    "productinformation": "mediaonlinemultiplexproductinfo",
    "technicalinformation": "mediamultiplextechinfo",
    "golive": "go-live",
}

HOARDING_STEPS = {
    "productinformation": "mediaofflinehoardinginfo",
    "technicalinformation": "mediaofflinehoardingtechinfo",
    "golive": "hoardingsgolive",
}

MULTIPLEX_CATEGORY = "Multiplex ADs"
DIGITAL_SUBCATEGORY = "Digital ADs"
HOARDINGS = "Hoardings"


def resolve_seller_hub_route(
    product: Optional[Mapping[str, Any]],
    company_type: str,
    action: str,
    review_reason_navigation: Optional[str] = None,
) -> str:
    """
    Resolve the route for an Edit or View action from the Seller Hub.

    Args:
        product: Listing payload (_id, ListingType, ProductCategoryName, ...)
        company_type: Company type name (e.g. "Textile", "Media")
        action: "edit" or "view"
        review_reason_navigation: Optional wizard step to reopen on edit

    Returns:
        Route path; the seller hub when nothing matches
    """
    product = product or {}
    product_id = product.get("_id")
    if not product_id:
        logger.warning("Seller hub route requested without product id")
        return SELLER_HUB_PATH

    if action == "view":
        return _resolve_view_route(product, company_type, product_id)
    if action == "edit":
        return _resolve_edit_route(product, company_type, product_id, review_reason_navigation)
    return SELLER_HUB_PATH


def _resolve_view_route(product: Mapping[str, Any], company_type: str, product_id: str) -> str:
    category = product.get("ProductCategoryName")
    subcategory = product.get("ProductSubCategoryName")

    if company_type == "Media":
        if category == MULTIPLEX_CATEGORY and subcategory != DIGITAL_SUBCATEGORY:
            return f"/multiplexmediaonlineproductpreview/{product_id}"
        return f"/mediaonlineproductpreview/{product_id}"

    if product.get("ListingType") == "Voucher":
        voucher_type = product.get("VoucherType") or ""
        if "Value Voucher" in voucher_type or "Gift Card" in voucher_type:
            return f"/valueandgiftvoucher/{product_id}"
        if "Offer Specific" in voucher_type:
            return f"/spacificvoucher/{product_id}"
        return f"/allvoucherpreview/{product_id}"

    preview_route = PREVIEW_ROUTES.get(company_type, "/allproductpreview")
    return f"{preview_route}/{product_id}"


def _resolve_edit_route(
    product: Mapping[str, Any],
    company_type: str,
    product_id: str,
    review_reason_navigation: Optional[str],
) -> str:
    step = STEP_ROUTES.get(review_reason_navigation or "", "/general-info")

    if product.get("bulk_upload_res_id"):
        return f"/mediaSheetsProductsPreview/{product_id}"

    if company_type == "Media":
        return _resolve_media_edit_route(product, product_id, review_reason_navigation)

    if product.get("ListingType") == "Voucher":
        voucher_route = VOUCHER_ROUTES.get(company_type)
        if not voucher_route:
            return f"/voucher/voucherinfo/{product_id}"
        review_key = (review_reason_navigation or "").lower()
        if company_type in ("Hotel", "Hotels") and review_key in HOTEL_VOUCHER_STEP_ROUTES:
            return f"{voucher_route}{HOTEL_VOUCHER_STEP_ROUTES[review_key]}/{product_id}"
        voucher_step = VOUCHER_STEP_ROUTES.get(step, "/generalinformation")
        return f"{voucher_route}{voucher_step}/{product_id}"

    category_route = PRODUCT_ROUTES.get(company_type)
    if category_route:
        return f"{category_route}{step}/{product_id}"
    return f"/others{step}/{product_id}"


def _resolve_media_edit_route(
    product: Mapping[str, Any],
    product_id: str,
    review_reason_navigation: Optional[str],
) -> str:
    review_key = (review_reason_navigation or "productinformation").lower()
    category = product.get("ProductCategoryName")
    subcategory = product.get("ProductSubCategoryName")

    if category == MULTIPLEX_CATEGORY:
        if subcategory == DIGITAL_SUBCATEGORY:
            media_step = DIGITAL_SCREEN_STEPS.get(review_key, DIGITAL_SCREEN_STEPS["productinformation"])
        else:
            media_step = MULTIPLEX_STEPS.get(review_key, MULTIPLEX_STEPS["productinformation"])
        return f"/mediaonline/{media_step}/{product_id}"
    if HOARDINGS in (category, subcategory):
        hoarding_step = HOARDING_STEPS.get(review_key, HOARDING_STEPS["productinformation"])
        return f"/mediaoffline/{hoarding_step}/{product_id}"
    return f"/mediaoffline/product-info/{product_id}"
