"""
Listing portal application factory.

Middleware order (outermost first):
1. ErrorHandlerMiddleware - correlation id, consistent error bodies
2. ListingSessionMiddleware - session cookie, sticky entry context

Guard outcomes are raised from dependencies and turned into responses by
the exception handlers registered here.
"""

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response

from listing_portal.api.routes import entitlements, listings
from listing_portal.config.settings import PortalConfig
from listing_portal.entitlements.identity import IdentityRegistry
from listing_portal.entitlements.session_store import SessionStore
from listing_portal.middleware.listing_session import ListingSessionMiddleware
from listing_portal.platform.errors import (
    ErrorHandlerMiddleware,
    ListingAccessDenied,
    ListingAccessPending,
)

logger = logging.getLogger(__name__)


async def listing_access_denied_handler(request: Request, exc: ListingAccessDenied) -> Response:
    # 303 keeps the denied URL out of history.
    return RedirectResponse(url=exc.location, status_code=exc.status_code)


async def listing_access_pending_handler(request: Request, exc: ListingAccessPending) -> Response:
    return Response(status_code=exc.status_code, headers={"Retry-After": str(exc.retry_after)})


def create_app(
    config: Optional[PortalConfig] = None,
    *,
    session_store: Optional[SessionStore] = None,
    identity_registry: Optional[IdentityRegistry] = None,
    portal_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the listing portal app.

    Args:
        config: Defaults to PortalConfig.from_env()
        session_store: Defaults to a SessionStore on config.redis_url
        identity_registry: Per-session identity resolvers
        portal_transport: Optional httpx transport for the portal API client
    """
    config = config or PortalConfig.from_env()
    if session_store is None:
        session_store = SessionStore(config.redis_url, config.session_ttl_seconds)

    app = FastAPI(title="Seller Listing Portal")
    app.state.config = config
    app.state.session_store = session_store
    app.state.identity_registry = identity_registry if identity_registry is not None else IdentityRegistry()
    app.state.portal_transport = portal_transport

    app.add_middleware(ListingSessionMiddleware, config=config, session_store=session_store)
    app.add_middleware(ErrorHandlerMiddleware)

    app.add_exception_handler(ListingAccessDenied, listing_access_denied_handler)
    app.add_exception_handler(ListingAccessPending, listing_access_pending_handler)

    app.include_router(entitlements.router)
    app.include_router(listings.router)

    logger.info(
        "Listing portal configured",
        extra={
            "admin_source_policy": config.admin_source_policy.value,
            "seller_hub_path": config.seller_hub_path,
        },
    )
    return app
