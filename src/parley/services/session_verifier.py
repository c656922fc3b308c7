"""Resolve ``Authorization`` headers to authenticated users.

Verification fails closed: a missing or malformed header, an unknown or
expired token, and an unreachable session store all yield ``None``.
"""

from __future__ import annotations

import logging

from parley.core.errors import SessionStoreError
from parley.schemas.user import SessionUser
from parley.services.session_store import SessionStore, mask_token

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header, or None if malformed."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


def resolve_token(token: str, store: SessionStore) -> SessionUser | None:
    """Look ``token`` up without renewing it."""
    try:
        user = store.get(token)
    except SessionStoreError as exc:
        logger.warning("Session store unavailable, treating request as anonymous: %s", exc)
        return None
    if user is None:
        logger.debug("No live session for token %s", mask_token(token))
    return user


def verify_authorization(authorization: str | None, store: SessionStore) -> SessionUser | None:
    """Return the session user for an ``Authorization`` header value.

    The store is not consulted when the header carries no usable token.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    return resolve_token(token, store)
