# src/parley/models/message.py
"""Models describing room and private messages."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from parley.db.session import Base
from parley.db.time import utcnow


class Message(Base):
    """A chat message, either broadcast to a room or sent privately.

    Exactly one of ``room_id`` and ``recipient_id`` is set. The dispatch
    handler enforces this; the table does not.
    """

    __tablename__ = "messages"

    message_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("rooms.room_id"), nullable=True)
    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.user_id"), nullable=False)
    recipient_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.user_id"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_messages_room_sent_at", "room_id", "sent_at"),
        Index("ix_messages_pair_sent_at", "sender_id", "recipient_id", "sent_at"),
    )
