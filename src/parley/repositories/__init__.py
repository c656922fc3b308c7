"""Data access helpers over the relational store."""

from .message_repo import MessageRepository, MessageRow
from .user_repo import UserRepository

__all__ = ["MessageRepository", "MessageRow", "UserRepository"]
