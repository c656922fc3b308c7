# src/parley/api/endpoints/auth.py
"""Signup and login endpoints for the Parley API."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from parley.api.dependencies import SessionDep, SessionStoreDep
from parley.core import security
from parley.core.errors import Conflict, Unauthorized
from parley.core.settings import settings
from parley.models import User
from parley.repositories import UserRepository
from parley.schemas.user import LoginRequest, SessionResponse, SessionUser, SignupRequest
from parley.services.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


def open_session(store: SessionStore, user: User) -> SessionResponse:
    """Issue a bearer token for ``user`` and cache its snapshot.

    Raises:
        SessionStoreError: If the session cannot be written.
    """
    token = security.new_session_token()
    snapshot = SessionUser(
        id=user.user_id,
        username=user.username,
        email=user.email,
        external_id=user.external_id,
    )
    store.put(token, snapshot, settings.session_ttl_seconds)
    return SessionResponse(token=token, **snapshot.model_dump())


@router.post("/signup", response_model=SessionResponse)
async def signup(payload: SignupRequest, db: SessionDep, store: SessionStoreDep) -> SessionResponse:
    """Create an account and log it in."""
    users = UserRepository(db)
    if users.get_by_username(payload.username) is not None:
        raise Conflict("USERNAME_EXISTS", "Username already taken")
    if users.email_taken(payload.email):
        raise Conflict("EMAIL_EXISTS", "Email already registered")

    user = users.create(username=payload.username, email=payload.email, password=payload.password)
    logger.info("New user registered: %s (id %s)", user.username, user.user_id)
    return open_session(store, user)


@router.post("/login", response_model=SessionResponse)
async def login(payload: LoginRequest, db: SessionDep, store: SessionStoreDep) -> SessionResponse:
    """Check credentials and open a session."""
    users = UserRepository(db)
    user = users.get_by_username(payload.username)
    if user is None or not security.verify_password(payload.password, user.password):
        raise Unauthorized("Invalid username or password")

    users.record_login(user)
    logger.info("User %s logged in", user.user_id)
    return open_session(store, user)
