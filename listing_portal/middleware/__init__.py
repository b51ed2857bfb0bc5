"""
Middleware package for the listing portal.

Provides:
- ListingSessionMiddleware: browser session id cookie and sticky entry context
"""
