"""Data access helpers for room and private messages."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parley.core.errors import StorageError
from parley.db.time import as_utc
from parley.models import Message, User

__all__ = ["MessageRepository", "MessageRow"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageRow:
    """Storage-side shape of a message joined with its sender's name."""

    message_id: int
    content: str
    sent_at: datetime
    sender_id: int
    sender_username: str


class MessageRepository:
    """Thin wrapper around database access for message entities.

    Room and private messages are disjoint: pair queries ignore anything
    tagged with a room even if sender and recipient match.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def insert(
        self,
        *,
        sender_id: int,
        content: str,
        room_id: int | None = None,
        recipient_id: int | None = None,
    ) -> tuple[int, datetime]:
        """Persist a message and return its ``(message_id, sent_at)``.

        Addressing is not validated here; callers supply exactly one of
        ``room_id`` and ``recipient_id``.

        Raises:
            StorageError: On constraint violation or connectivity failure.
        """
        message = Message(
            sender_id=sender_id,
            content=content,
            room_id=room_id,
            recipient_id=recipient_id,
        )
        try:
            self.session.add(message)
            self.session.commit()
            self.session.refresh(message)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Message insert failed: {exc}") from exc
        return message.message_id, as_utc(message.sent_at)

    def list_by_room(self, room_id: int) -> list[MessageRow]:
        """Return every message posted to a room, oldest first."""
        stmt = self._base_query().where(Message.room_id == room_id)
        return self._fetch(stmt)

    def list_by_pair(self, user_a: int, user_b: int) -> list[MessageRow]:
        """Return the private conversation between two users, oldest first."""
        stmt = self._base_query().where(
            Message.room_id.is_(None),
            or_(
                and_(Message.sender_id == user_a, Message.recipient_id == user_b),
                and_(Message.sender_id == user_b, Message.recipient_id == user_a),
            ),
        )
        return self._fetch(stmt)

    @staticmethod
    def _base_query():
        return (
            select(
                Message.message_id,
                Message.content,
                Message.sent_at,
                Message.sender_id,
                User.username,
            )
            .join(User, Message.sender_id == User.user_id)
            .order_by(Message.sent_at.asc(), Message.message_id.asc())
        )

    def _fetch(self, stmt) -> list[MessageRow]:
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Message query failed: {exc}") from exc
        return [
            MessageRow(
                message_id=row.message_id,
                content=row.content,
                sent_at=as_utc(row.sent_at),
                sender_id=row.sender_id,
                sender_username=row.username,
            )
            for row in rows
        ]
