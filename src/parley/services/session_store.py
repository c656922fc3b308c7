"""Redis-backed session cache mapping bearer tokens to user snapshots."""

from __future__ import annotations

import logging
import threading
from typing import Any

import redis
from pydantic import ValidationError as PydanticValidationError

from parley.core.errors import SessionStoreError
from parley.core.settings import settings
from parley.schemas.user import SessionUser

logger = logging.getLogger(__name__)


def mask_token(token: str) -> str:
    """Return a log-safe prefix of a bearer token."""
    return f"{token[:8]}..." if len(token) > 8 else "***"


class SessionStore:
    """Write-once, read-many session records with an absolute expiry.

    Expiry is delegated to Redis (``SET ... EX``), so a record is either
    present and unexpired or absent. Reads never extend the TTL.
    """

    def __init__(self, client: Any) -> None:
        self._redis = client

    def put(self, token: str, user: SessionUser, ttl_seconds: int | None = None) -> None:
        """Store ``user`` under ``token``, silently replacing any previous value.

        Raises:
            SessionStoreError: If Redis cannot be reached.
        """
        ttl = int(ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds)
        payload = user.model_dump_json(by_alias=True)
        try:
            self._redis.set(token, payload, ex=ttl)
        except redis.RedisError as exc:
            raise SessionStoreError(f"Session write failed: {exc}") from exc

    def get(self, token: str) -> SessionUser | None:
        """Return the user snapshot for ``token``, or None if absent or expired.

        Raises:
            SessionStoreError: If Redis cannot be reached.
        """
        try:
            raw = self._redis.get(token)
        except redis.RedisError as exc:
            raise SessionStoreError(f"Session read failed: {exc}") from exc
        if raw is None:
            return None
        try:
            return SessionUser.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Discarding unreadable session payload for token %s", mask_token(token))
            return None


class _SessionStoreSingleton:
    """Process-wide session store, created once on first use."""

    _instance: SessionStore | None = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> SessionStore:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    client = redis.from_url(
                        settings.redis_url,
                        decode_responses=True,
                        socket_timeout=5,
                        socket_connect_timeout=5,
                    )
                    cls._instance = SessionStore(client)
        return cls._instance


def get_session_store() -> SessionStore:
    """Return the shared session store."""
    return _SessionStoreSingleton.get_instance()
