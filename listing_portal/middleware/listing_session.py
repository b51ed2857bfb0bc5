"""Browser session id and entry context resolution for every request."""

from __future__ import annotations

import logging
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from listing_portal.config.settings import PortalConfig
from listing_portal.entitlements.entry_context import resolve_entry_context
from listing_portal.entitlements.session_store import SessionStore

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return uuid.uuid4().hex


class ListingSessionMiddleware(BaseHTTPMiddleware):
    """
    Attach session_id and arrival_context to request.state.

    Resolving on every request means any navigation carrying source /
    companyType makes them sticky, not just guarded routes.
    """

    def __init__(self, app, config: PortalConfig, session_store: SessionStore):
        super().__init__(app)
        self.config = config
        self.session_store = session_store

    async def dispatch(self, request: Request, call_next):
        session_id = request.cookies.get(self.config.session_cookie)
        issued = not session_id
        if issued:
            session_id = generate_session_id()

        request.state.session_id = session_id
        request.state.arrival_context = resolve_entry_context(
            request.query_params,
            self.session_store.scoped(session_id),
        )

        response = await call_next(request)
        if issued:
            # Session cookie: no max_age, so it ends with the browser session.
            response.set_cookie(
                self.config.session_cookie,
                session_id,
                httponly=True,
                samesite="lax",
            )
        return response
