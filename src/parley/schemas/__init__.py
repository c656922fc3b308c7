"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse
from .message import MessageCreate, MessageSent, MessageView
from .room import RoomResponse
from .user import LoginRequest, SessionResponse, SessionUser, SignupRequest, UserSummary

__all__ = [
    "ErrorResponse",
    "MessageCreate", "MessageSent", "MessageView",
    "RoomResponse",
    "LoginRequest", "SessionResponse", "SessionUser", "SignupRequest", "UserSummary",
]
