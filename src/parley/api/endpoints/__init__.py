"""API endpoint modules."""

from .auth import router as auth_router
from .beams import router as beams_router
from .messages import router as messages_router
from .rooms import router as rooms_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "beams_router",
    "messages_router",
    "rooms_router",
    "users_router",
]
