"""SQLAlchemy models for the Parley application."""

from .message import Message
from .room import Room
from .user import User

__all__ = [
    "Message",
    "Room",
    "User",
]
