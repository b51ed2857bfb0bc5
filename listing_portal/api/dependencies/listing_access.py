"""
Listing access dependencies.

FastAPI dependencies that resolve the arrival context and identity of the
current browser session and enforce listing entitlements on guarded routes.
The same evaluation backs the guard and the read accessors.
"""

import hashlib
import logging
from typing import Callable, Dict, Optional, Tuple

from fastapi import Depends, Request

from listing_portal.config.settings import PortalConfig
from listing_portal.entitlements.entry_context import resolve_entry_context
from listing_portal.entitlements.guard import (
    GuardDecision,
    GuardOutcome,
    ListingKind,
    check_listing_access,
)
from listing_portal.entitlements.identity import IdentityRegistry, IdentityResolver
from listing_portal.entitlements.models import ArrivalContext, Identity
from listing_portal.entitlements.session_store import SessionStore
from listing_portal.platform.errors import ListingAccessDenied, ListingAccessPending
from listing_portal.platform.portal_client import PortalClient

logger = logging.getLogger(__name__)

PENDING_RETRY_AFTER_SECONDS = 1


def get_config(request: Request) -> PortalConfig:
    return request.app.state.config


def get_session_id(request: Request) -> str:
    session_id = getattr(request.state, "session_id", None)
    if not session_id:
        session_id = request.cookies.get(get_config(request).session_cookie, "")
    return session_id


def get_arrival_context(request: Request) -> ArrivalContext:
    """ArrivalContext resolved by ListingSessionMiddleware (or resolved now)."""
    arrival = getattr(request.state, "arrival_context", None)
    if arrival is not None:
        return arrival
    session_id = get_session_id(request)
    if not session_id:
        return ArrivalContext()
    store: SessionStore = request.app.state.session_store
    return resolve_entry_context(request.query_params, store.scoped(session_id))


def _forwarded_credentials(request: Request) -> Tuple[Dict[str, str], Optional[str]]:
    """Cookies (minus our own session cookie) and Authorization sent to the portal."""
    session_cookie = get_config(request).session_cookie
    cookies = {name: value for name, value in request.cookies.items() if name != session_cookie}
    return cookies, request.headers.get("Authorization")


def credentials_fingerprint(cookies: Dict[str, str], authorization: Optional[str]) -> str:
    material = "\n".join(f"{name}={value}" for name, value in sorted(cookies.items()))
    material += f"\nAuthorization={authorization or ''}"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def _portal_client_factory(
    request: Request,
    cookies: Dict[str, str],
    authorization: Optional[str],
) -> Callable[[], PortalClient]:
    config = get_config(request)
    transport = getattr(request.app.state, "portal_transport", None)

    def factory() -> PortalClient:
        return PortalClient(config, cookies=cookies, authorization=authorization, transport=transport)

    return factory


async def get_identity_resolver(request: Request) -> IdentityResolver:
    registry: IdentityRegistry = request.app.state.identity_registry
    cookies, authorization = _forwarded_credentials(request)
    return registry.get_or_create(
        get_session_id(request),
        _portal_client_factory(request, cookies, authorization),
        credentials_fingerprint(cookies, authorization),
    )


async def get_identity_snapshot(
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    """Current identity without waiting; starts the first resolution."""
    resolver.ensure_started()
    return resolver.snapshot


async def get_settled_identity(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    """Identity after waiting up to identity_wait_seconds; may still be loading."""
    return await resolver.wait_until_settled(get_config(request).identity_wait_seconds)


def require_listing_access(kind: ListingKind, category: Optional[str] = None) -> Callable:
    """
    Factory that creates a guard dependency for one listing route.

    Use on a route: dependencies=[Depends(require_listing_access(ListingKind.PRODUCT, "textile"))]
    Raises ListingAccessPending while identity resolves (204, nothing rendered)
    and ListingAccessDenied when not entitled (303 to the seller hub).

    Args:
        kind: Listing kind of the route
        category: Category slug / voucher id; None for picker routes
    """
    kind = ListingKind(kind)

    async def _check(
        request: Request,
        identity: Identity = Depends(get_settled_identity),
        arrival: ArrivalContext = Depends(get_arrival_context),
    ) -> GuardDecision:
        config = get_config(request)
        decision = check_listing_access(
            identity,
            arrival,
            kind,
            category,
            policy=config.admin_source_policy,
            redirect_to=config.seller_hub_path,
        )
        if decision.outcome is GuardOutcome.PENDING:
            raise ListingAccessPending(retry_after=PENDING_RETRY_AFTER_SECONDS)
        if decision.outcome is GuardOutcome.REDIRECT:
            raise ListingAccessDenied(decision.redirect_to, kind=kind.value, category=category)
        return decision

    return _check
