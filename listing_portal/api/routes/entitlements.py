"""
Read-only entitlement accessors for the single-page app.

The guard on listing routes is authoritative; these endpoints exist so the
menu, pickers and forms render the same verdict. None of them wait for
identity: while it resolves they answer with loading=true.
"""

from fastapi import APIRouter, Depends, Request

from listing_portal.api.dependencies.listing_access import (
    get_arrival_context,
    get_config,
    get_identity_resolver,
    get_identity_snapshot,
)
from listing_portal.api.schemas.entitlements import (
    EntitlementsResponse,
    EntryContextResponse,
    IdentityResponse,
    NavigationResponse,
    PickerResponse,
    SellerHubRouteRequest,
    SellerHubRouteResponse,
)
from listing_portal.entitlements.engine import effective_company_type, evaluate
from listing_portal.entitlements.guard import ListingKind
from listing_portal.entitlements.identity import IdentityResolver
from listing_portal.entitlements.models import ArrivalContext, Identity
from listing_portal.entitlements.navigation import build_picker, project_navigation
from listing_portal.entitlements.seller_hub_routes import resolve_seller_hub_route

router = APIRouter(prefix="/api", tags=["entitlements"])


@router.get("/entry-context", response_model=EntryContextResponse)
def get_entry_context(arrival: ArrivalContext = Depends(get_arrival_context)) -> EntryContextResponse:
    return EntryContextResponse(source=arrival.source, company_type=arrival.company_type)


@router.get("/entitlements", response_model=EntitlementsResponse)
async def get_entitlements(
    request: Request,
    identity: Identity = Depends(get_identity_snapshot),
    arrival: ArrivalContext = Depends(get_arrival_context),
) -> EntitlementsResponse:
    """Return allowed categories and vouchers for the current session."""
    entitlement = evaluate(identity, arrival, get_config(request).admin_source_policy)
    return EntitlementsResponse.from_entitlement(entitlement, loading=identity.loading)


@router.get("/navigation", response_model=NavigationResponse)
async def get_navigation(
    request: Request,
    identity: Identity = Depends(get_identity_snapshot),
    arrival: ArrivalContext = Depends(get_arrival_context),
) -> NavigationResponse:
    config = get_config(request)
    menu = project_navigation(identity, arrival, config.admin_source_policy, config.seller_hub_path)
    return NavigationResponse.from_menu(menu)


@router.get("/pickers/{kind}", response_model=PickerResponse)
async def get_picker(
    kind: ListingKind,
    request: Request,
    identity: Identity = Depends(get_identity_snapshot),
    arrival: ArrivalContext = Depends(get_arrival_context),
) -> PickerResponse:
    picker = build_picker(identity, arrival, kind, get_config(request).admin_source_policy)
    return PickerResponse.from_picker(picker)


@router.get("/identity", response_model=IdentityResponse)
async def get_identity(identity: Identity = Depends(get_identity_snapshot)) -> IdentityResponse:
    return IdentityResponse.from_identity(identity)


@router.post("/identity/refetch", response_model=IdentityResponse)
async def refetch_identity(resolver: IdentityResolver = Depends(get_identity_resolver)) -> IdentityResponse:
    """Re-run user -> company -> company type from the first step."""
    identity = await resolver.refetch()
    return IdentityResponse.from_identity(identity)


@router.post("/seller-hub/route", response_model=SellerHubRouteResponse)
async def get_seller_hub_route(
    body: SellerHubRouteRequest,
    identity: Identity = Depends(get_identity_snapshot),
    arrival: ArrivalContext = Depends(get_arrival_context),
) -> SellerHubRouteResponse:
    company_type = body.company_type or effective_company_type(identity, arrival)
    path = resolve_seller_hub_route(
        body.product,
        company_type,
        body.action,
        body.review_reason_navigation,
    )
    return SellerHubRouteResponse(path=path)
