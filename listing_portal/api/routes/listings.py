"""
Listing wizard routes.

Every product/voucher wizard path serves the same SPA shell. Each path is
registered from the catalog with its own guard dependency, so a category's
routes exist exactly once and always carry that category's check:

- pickers, generic bulk upload pages    -> picker guards (kind only)
- /{slug}[/{step}[/{listing_id}]]       -> product guard for slug
- /{voucher_id}/{step}[/{listing_id}]   -> voucher guard for voucher_id
- per-category bulk upload pages        -> product guard for that category

The seller hub and the previews are never guarded. Any other path
redirects to the seller hub.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from listing_portal.api.dependencies.listing_access import get_config, require_listing_access
from listing_portal.entitlements.catalog import all_categories, all_vouchers
from listing_portal.entitlements.guard import ListingKind
from listing_portal.entitlements.navigation import ADD_PRODUCT_PATH, ADD_VOUCHER_PATH

logger = logging.getLogger(__name__)

router = APIRouter(tags=["listings"])

PRODUCT_STEPS = ("general-info", "product-info", "tech-info", "go-live")

MEDIA_STEPS = {
    "mediaonline": (
        "mediaonlinedigitalscreensinfo",
        "mediaonlinedigitalscreenstechinfo",
        "digitalscreensgolive",
        "mediaonlinemultiplexproductinfo",
        "mediamultiplextechinfo",
    ),
    "mediaoffline": (
        "mediaofflinehoardinginfo",
        "mediaofflinehoardingtechinfo",
        "hoardingsgolive",
        "mediaofflineproductinfo",
    ),
}

VOUCHER_STEPS = (
    "generalinformation",
    "techinfo",
    "vouchertechinfo",
    "voucherdesign",
    "vouchergolive",
    "golive",
)

HOTEL_VOUCHER_STEPS = ("hotelsproductinfo", "hotelstechinfo", "hotelsdesign", "hotelsgolive")

VOUCHER_INFO_PATH = "/voucher/voucherinfo"

# Listing type choice, media channel choice and the generic bulk upload pages.
PRODUCT_PICKER_PATHS = (
    "/physical",
    "/media-physical",
    "/bulkuploadproduct",
    "/productbulkupload",
    "/bulkuploadexcelpreview",
    "/imageupload",
)

# (upload path, category slug, uploaded products path)
BULK_UPLOAD_CATEGORIES = (
    ("textilebulkupload", "textile", "textileBulkuploadshowproducts"),
    ("electronicbulkupload", "electronics", "electronicBulkuploadshowproducts"),
    ("fmcgbulkupload", "fmcg", "fmcgBulkuploadshowproducts"),
    ("officesupplybulkupload", "officesupply", "officesupplyBulkuploadshowproducts"),
    ("mobilitybulkupload", "mobility", "mobilityBulkuploadshowproducts"),
    ("otherbulkupload", "others", "otherBulkuploadshowproducts"),
    ("resturantbulkupload", "restaurant", "resturantBulkuploadshowproducts"),
    ("mediaonlinebulkupload", "mediaonline", "mediaonlineBulkuploadshowproducts"),
    ("mediaofflinebulkupload", "mediaoffline", None),
)

# Read-only previews, reachable from the seller hub for any listing.
PREVIEW_PREFIXES = (
    "allproductpreview",
    "allvoucherpreview",
    "specificvoucherpreview",
    "electronicsproductpreview",
    "RestaurantProductPreview",
    "fmcgproductpreview",
    "mediaonlineproductpreview",
    "multiplexmediaonlineproductpreview",
    "mediaSheetsProductsPreview",
    "mobilityproductpreview",
    "textilepreviewpage",
    "valueandgiftvoucher",
    "spacificvoucher",
    "textilesvoucherprev",
)

SHELL_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "Cache-Control": "no-store",
}


def _build_shell_html(frontend_origin: str) -> str:
    """Build the HTML bootstrap page that loads the listing SPA."""
    script_src = f"{frontend_origin}/src/main.tsx" if frontend_origin else "/src/main.tsx"
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Seller Listing Portal</title>
</head>
<body>
  <div id="root"></div>
  <script type="module" src="{script_src}"></script>
</body>
</html>"""


def _shell_response(request: Request) -> HTMLResponse:
    return HTMLResponse(
        content=_build_shell_html(get_config(request).frontend_url.rstrip("/")),
        status_code=200,
        headers=SHELL_HEADERS,
    )


async def serve_shell(request: Request) -> HTMLResponse:
    return _shell_response(request)


async def serve_listing_shell(listing_id: str, request: Request) -> HTMLResponse:
    return _shell_response(request)


@router.get("/", include_in_schema=False)
async def portal_entry(request: Request):
    """Root entry: land on the seller hub."""
    return RedirectResponse(url=get_config(request).seller_hub_path, status_code=303)


@router.get("/sellerhub", response_class=HTMLResponse, include_in_schema=False)
async def seller_hub(request: Request):
    return _shell_response(request)


def _add_guarded(
    path: str,
    kind: ListingKind,
    category: Optional[str] = None,
    with_listing_id: bool = False,
) -> None:
    guard = Depends(require_listing_access(kind, category))
    router.add_api_route(
        path,
        serve_shell,
        methods=["GET"],
        response_class=HTMLResponse,
        dependencies=[guard],
        include_in_schema=False,
    )
    if with_listing_id:
        router.add_api_route(
            path + "/{listing_id}",
            serve_listing_shell,
            methods=["GET"],
            response_class=HTMLResponse,
            dependencies=[guard],
            include_in_schema=False,
        )


def _register_listing_routes() -> None:
    _add_guarded(ADD_PRODUCT_PATH, ListingKind.PRODUCT)
    _add_guarded(ADD_VOUCHER_PATH, ListingKind.VOUCHER)
    _add_guarded(VOUCHER_INFO_PATH, ListingKind.VOUCHER, with_listing_id=True)
    for path in PRODUCT_PICKER_PATHS:
        _add_guarded(path, ListingKind.PRODUCT)

    for category in all_categories():
        if category.slug in MEDIA_STEPS:
            _add_guarded(f"/{category.slug}", ListingKind.PRODUCT, category.slug)
        for step in PRODUCT_STEPS + MEDIA_STEPS.get(category.slug, ()):
            _add_guarded(f"/{category.slug}/{step}", ListingKind.PRODUCT, category.slug, with_listing_id=True)

    for voucher in all_vouchers():
        steps = VOUCHER_STEPS
        if voucher.id == "hotelsVoucher":
            steps = steps + HOTEL_VOUCHER_STEPS
        for step in steps:
            _add_guarded(f"/{voucher.id}/{step}", ListingKind.VOUCHER, voucher.id, with_listing_id=True)

    for path, slug, show_products_path in BULK_UPLOAD_CATEGORIES:
        _add_guarded(f"/{path}", ListingKind.PRODUCT, slug)
        if show_products_path:
            _add_guarded(f"/{show_products_path}", ListingKind.PRODUCT, slug)

    for prefix in PREVIEW_PREFIXES:
        router.add_api_route(
            f"/{prefix}/{{listing_id}}",
            serve_listing_shell,
            methods=["GET"],
            response_class=HTMLResponse,
            include_in_schema=False,
        )


_register_listing_routes()


@router.get("/myproduct", include_in_schema=False)
async def my_products(request: Request):
    return RedirectResponse(url=get_config(request).seller_hub_path, status_code=303)


@router.get("/{unmatched:path}", include_in_schema=False)
async def unmatched_route(unmatched: str, request: Request):
    """Any other page lands on the seller hub. Must stay the last route."""
    logger.info("Unknown portal route, redirecting to seller hub", extra={"path": "/" + unmatched})
    return RedirectResponse(url=get_config(request).seller_hub_path, status_code=303)
