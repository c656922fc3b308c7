"""Business logic services for the Parley application."""

from .messages import MessageService
from .notifications import PushNotifier, get_push_notifier
from .session_store import SessionStore, get_session_store
from .session_verifier import verify_authorization

__all__ = [
    "MessageService",
    "PushNotifier",
    "SessionStore",
    "get_push_notifier",
    "get_session_store",
    "verify_authorization",
]
