"""HTTP API for the Parley application."""

from .endpoints import (
    auth_router,
    beams_router,
    messages_router,
    rooms_router,
    users_router,
)

__all__ = [
    "auth_router",
    "beams_router",
    "messages_router",
    "rooms_router",
    "users_router",
]
