"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from parley.core.errors import Unauthorized
from parley.db.session import get_db
from parley.repositories import MessageRepository, UserRepository
from parley.schemas.user import SessionUser
from parley.services.messages import MessageService
from parley.services.notifications import PushNotifier, get_push_notifier
from parley.services.session_store import SessionStore, get_session_store
from parley.services.session_verifier import verify_authorization

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_store_dep() -> SessionStore:
    """Return the shared session store."""
    return get_session_store()


def get_push_notifier_dep() -> PushNotifier:
    """Return the shared push notifier."""
    return get_push_notifier()


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store_dep)]
PushNotifierDep = Annotated[PushNotifier, Depends(get_push_notifier_dep)]


def get_optional_user(
    store: SessionStoreDep,
    authorization: Annotated[str | None, Header()] = None,
) -> SessionUser | None:
    """Resolve the bearer token of the request, or None if unauthenticated."""
    return verify_authorization(authorization, store)


def get_current_user(
    user: Annotated[SessionUser | None, Depends(get_optional_user)],
) -> SessionUser:
    """Get the current authenticated user from the session cache.

    Raises:
        Unauthorized: If the token is missing, malformed or expired.
    """
    if user is None:
        raise Unauthorized()
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[SessionUser, Depends(get_current_user)]


def get_message_service(db: SessionDep, notifier: PushNotifierDep) -> MessageService:
    """Build a message service bound to the request's database session."""
    return MessageService(MessageRepository(db), UserRepository(db), notifier)


MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
