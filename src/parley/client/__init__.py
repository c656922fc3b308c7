"""Client-side access to the Parley API with an optimistic message cache."""

from .api import ApiError, ChatApiClient, ClientConfig, UnauthorizedError
from .cache import CachedMessage, MessageCache
from .session import ChatSession

__all__ = [
    "ApiError",
    "CachedMessage",
    "ChatApiClient",
    "ChatSession",
    "ClientConfig",
    "MessageCache",
    "UnauthorizedError",
]
