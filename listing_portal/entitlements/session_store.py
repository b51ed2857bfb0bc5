from __future__ import annotations

import logging
import os
import time
from typing import Dict, Optional, Protocol, Tuple

import redis

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 86400


class KeyValueStore(Protocol):
    """Session-scoped string store consumed by the entry context resolver."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class SessionStore:
    """
    Redis-backed per-browser-session store with in-memory fallback.

    A Redis error at runtime is logged and the call is served from memory;
    callers never see it.
    """

    def __init__(self, redis_url: Optional[str] = None, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self._ttl_seconds = ttl_seconds
        self._redis = None
        self._mem: Dict[str, Tuple[int, str]] = {}
        redis_url = redis_url if redis_url is not None else os.getenv("REDIS_URL")

        if redis_url:
            try:
                self._redis = redis.from_url(redis_url, decode_responses=True)
                self._redis.ping()
            except Exception as e:
                logger.warning("Redis unavailable for session store, using memory: %s", type(e).__name__)
                self._redis = None

    @staticmethod
    def _require_session_id(session_id: str) -> str:
        normalized = str(session_id).strip()
        if not normalized:
            raise ValueError("session_id is required")
        return normalized

    @staticmethod
    def _key(session_id: str, key: str) -> str:
        return f"listing_session:v1:{session_id}:{key}"

    def _expired(self, stored_at: int, now: int) -> bool:
        return now - stored_at > self._ttl_seconds

    def get(self, session_id: str, key: str) -> Optional[str]:
        storage_key = self._key(self._require_session_id(session_id), key)

        if self._redis is not None:
            try:
                return self._redis.get(storage_key)
            except redis.RedisError as e:
                logger.warning("Session store read failed, using memory: %s", type(e).__name__)

        data = self._mem.get(storage_key)
        if not data:
            return None
        stored_at, value = data
        if self._expired(stored_at, int(time.time())):
            self._mem.pop(storage_key, None)
            return None
        return value

    def set(self, session_id: str, key: str, value: str) -> None:
        storage_key = self._key(self._require_session_id(session_id), key)

        if self._redis is not None:
            try:
                self._redis.setex(storage_key, self._ttl_seconds, value)
                return
            except redis.RedisError as e:
                logger.warning("Session store write failed, using memory: %s", type(e).__name__)

        now = int(time.time())
        self._sweep_expired(now)
        self._mem[storage_key] = (now, value)

    def _sweep_expired(self, now: int) -> None:
        expired = [k for k, (stored_at, _) in self._mem.items() if self._expired(stored_at, now)]
        for k in expired:
            del self._mem[k]

    def scoped(self, session_id: str) -> "ScopedSessionStore":
        return ScopedSessionStore(self, self._require_session_id(session_id))


class ScopedSessionStore:
    """KeyValueStore view of one browser session."""

    def __init__(self, store: SessionStore, session_id: str) -> None:
        self._store = store
        self._session_id = session_id

    def get(self, key: str) -> Optional[str]:
        return self._store.get(self._session_id, key)

    def set(self, key: str, value: str) -> None:
        self._store.set(self._session_id, key, value)


class MemoryStore:
    """Plain dict-backed KeyValueStore."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
