"""
Tests for sticky entry context resolution and the session store.
"""

import time

import pytest
import redis

from listing_portal.entitlements.entry_context import (
    COMPANY_TYPE_KEY,
    SOURCE_KEY,
    resolve_entry_context,
)
from listing_portal.entitlements.models import ArrivalContext, normalize_signal
from listing_portal.entitlements.session_store import MemoryStore, SessionStore


class _FakeRedis:
    def __init__(self):
        self.store = {}
        self.ttls = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl


class _FailingRedis:
    def get(self, key):
        raise redis.ConnectionError("connection reset")

    def setex(self, key, ttl, value):
        raise redis.ConnectionError("connection reset")


class TestNormalizeSignal:
    """Empty and sentinel values collapse to ""."""

    @pytest.mark.parametrize("value", [None, "", "   ", "undefined", "null", "NULL", " Undefined "])
    def test_absent_values(self, value):
        assert normalize_signal(value) == ""

    def test_trims(self):
        assert normalize_signal("  dashboard ") == "dashboard"

    def test_arrival_context_normalizes_fields(self):
        arrival = ArrivalContext(source="undefined", company_type=" Media ")
        assert arrival.source == ""
        assert arrival.company_type == "Media"


class TestResolveEntryContext:
    """Query wins, and is written through to the session store."""

    def test_query_values_are_persisted(self):
        store = MemoryStore()
        arrival = resolve_entry_context({"source": "dashboard", "companyType": "Media"}, store)

        assert arrival == ArrivalContext(source="dashboard", company_type="Media")
        assert store.values == {SOURCE_KEY: "dashboard", COMPANY_TYPE_KEY: "Media"}

    def test_sticky_across_navigations(self):
        store = MemoryStore()
        resolve_entry_context({"source": "dashboard"}, store)

        arrival = resolve_entry_context({}, store)

        assert arrival.source == "dashboard"

    def test_query_overrides_stored_value(self):
        store = MemoryStore({SOURCE_KEY: "dashboard"})

        arrival = resolve_entry_context({"source": "admin"}, store)

        assert arrival.source == "admin"
        assert store.values[SOURCE_KEY] == "admin"

    def test_undefined_query_value_keeps_stored_value(self):
        store = MemoryStore({COMPANY_TYPE_KEY: "Textile"})

        arrival = resolve_entry_context({"companyType": "undefined"}, store)

        assert arrival.company_type == "Textile"
        assert store.values[COMPANY_TYPE_KEY] == "Textile"

    def test_fields_are_independent(self):
        store = MemoryStore({COMPANY_TYPE_KEY: "FMCG"})

        arrival = resolve_entry_context({"source": "admin"}, store)

        assert arrival == ArrivalContext(source="admin", company_type="FMCG")

    def test_nothing_anywhere(self):
        store = MemoryStore()
        assert resolve_entry_context(None, store) == ArrivalContext()
        assert store.values == {}

    def test_repeated_write_is_idempotent(self):
        store = MemoryStore()
        resolve_entry_context({"source": "dashboard"}, store)
        resolve_entry_context({"source": "dashboard"}, store)
        assert store.values == {SOURCE_KEY: "dashboard"}


class TestSessionStore:
    """SessionStore memory fallback and redis path."""

    def test_memory_fallback_scoped_per_session(self):
        store = SessionStore(redis_url="")
        store.scoped("session-a").set(SOURCE_KEY, "dashboard")

        assert store.scoped("session-a").get(SOURCE_KEY) == "dashboard"
        assert store.scoped("session-b").get(SOURCE_KEY) is None

    def test_memory_entries_expire(self):
        store = SessionStore(redis_url="", ttl_seconds=10)
        key = f"listing_session:v1:session-a:{SOURCE_KEY}"
        store._mem[key] = (int(time.time()) - 60, "dashboard")

        assert store.get("session-a", SOURCE_KEY) is None

    def test_empty_session_id_rejected(self):
        store = SessionStore(redis_url="")
        with pytest.raises(ValueError):
            store.scoped("  ")

    def test_redis_writes_use_ttl(self):
        store = SessionStore(redis_url="", ttl_seconds=120)
        fake = _FakeRedis()
        store._redis = fake

        store.set("session-a", COMPANY_TYPE_KEY, "Media")

        key = f"listing_session:v1:session-a:{COMPANY_TYPE_KEY}"
        assert fake.store[key] == "Media"
        assert fake.ttls[key] == 120
        assert store.get("session-a", COMPANY_TYPE_KEY) == "Media"

    def test_unreachable_redis_falls_back_to_memory(self):
        store = SessionStore(redis_url="redis://127.0.0.1:1/0")
        store.set("session-a", SOURCE_KEY, "admin")
        assert store._redis is None
        assert store.get("session-a", SOURCE_KEY) == "admin"

    def test_redis_errors_fall_back_to_memory(self):
        store = SessionStore(redis_url="")
        store._redis = _FailingRedis()

        store.set("session-a", SOURCE_KEY, "dashboard")

        assert store.get("session-a", SOURCE_KEY) == "dashboard"

    def test_entry_context_survives_redis_errors(self):
        store = SessionStore(redis_url="")
        store._redis = _FailingRedis()

        arrival = resolve_entry_context({"companyType": "Media"}, store.scoped("session-a"))

        assert arrival == ArrivalContext(company_type="Media")

    def test_expired_memory_entries_swept_on_write(self):
        store = SessionStore(redis_url="", ttl_seconds=10)
        stale_key = f"listing_session:v1:one-shot:{SOURCE_KEY}"
        store._mem[stale_key] = (int(time.time()) - 60, "dashboard")

        store.set("session-b", SOURCE_KEY, "admin")

        assert stale_key not in store._mem
        assert store.get("session-b", SOURCE_KEY) == "admin"
