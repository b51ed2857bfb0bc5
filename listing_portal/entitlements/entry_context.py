"""
Entry context resolution: arrival source and arrival company type.

Each field merges two sources with fixed precedence:
1. The current request's query parameter (source / companyType)
2. The value persisted in the browser session by an earlier request

A present query value is written to the session store before the merge so
later navigations that omit the parameter still see it. The write is
idempotent (same key, same value) and is the only writer of these keys.
"""

import logging
from typing import Any, Mapping, Optional

from listing_portal.entitlements.models import ArrivalContext, normalize_signal
from listing_portal.entitlements.session_store import KeyValueStore

logger = logging.getLogger(__name__)

SOURCE_PARAM = "source"
COMPANY_TYPE_PARAM = "companyType"

SOURCE_KEY = "listing_entry_source"
COMPANY_TYPE_KEY = "listing_entry_company_type"

_FIELDS = (
    (SOURCE_PARAM, SOURCE_KEY),
    (COMPANY_TYPE_PARAM, COMPANY_TYPE_KEY),
)


def _resolve_field(query_params: Mapping[str, Any], store: KeyValueStore, param: str, key: str) -> str:
    from_query = normalize_signal(query_params.get(param))
    if from_query:
        store.set(key, from_query)
        logger.debug("Persisted entry context value", extra={"session_key": key})
        return from_query
    return normalize_signal(store.get(key))


def resolve_entry_context(
    query_params: Optional[Mapping[str, Any]],
    store: KeyValueStore,
) -> ArrivalContext:
    """
    Resolve the ArrivalContext for the current navigation.

    Args:
        query_params: Query parameters of the current request (read-only)
        store: Session-scoped store; receives the sticky writes

    Returns:
        ArrivalContext with "" for every field that is absent everywhere
    """
    params = query_params or {}
    source, company_type = (
        _resolve_field(params, store, param, key) for param, key in _FIELDS
    )
    return ArrivalContext(source=source, company_type=company_type)
