"""Credential hashing and session token helpers."""
from __future__ import annotations

import uuid

from passlib.context import CryptContext

from parley.core.settings import settings

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=settings.password_hash_rounds,
)


def hash_password(password: str) -> str:
    """Return a salted PBKDF2-SHA256 hash suitable for the users table."""
    return pwd_context.hash(password)


def verify_password(password: str, stored_hash: str) -> bool:
    """Return True if ``password`` matches ``stored_hash``."""
    return pwd_context.verify(password, stored_hash)


def new_session_token() -> str:
    """Return a fresh opaque bearer token."""
    return str(uuid.uuid4())


def new_external_id() -> str:
    """Return a push-notification subscriber identifier for a new user."""
    return str(uuid.uuid4())
