"""Message-related Pydantic schemas (wire contracts)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MessageCreate(BaseModel):
    """Body of ``POST /message``.

    The sender is never part of the payload; it comes from the session.
    """

    content: str = Field(..., min_length=1, description="Message text")
    room_id: int | None = Field(None, gt=0, description="Target room for a broadcast message")
    recipient_id: int | None = Field(None, gt=0, description="Target user for a private message")

    @model_validator(mode="after")
    def exactly_one_target(self) -> MessageCreate:
        if (self.room_id is None) == (self.recipient_id is None):
            raise ValueError("Exactly one of room_id or recipient_id must be provided")
        return self

    @property
    def is_private(self) -> bool:
        """Return True for 1:1 messages."""
        return self.recipient_id is not None


class MessageSent(BaseModel):
    """Acknowledgement returned once a message is durably stored."""

    success: bool = True
    message_id: int
    sent_at: datetime


class MessageView(BaseModel):
    """Display view-model returned by the history endpoints."""

    id: str
    text: str
    time: str = Field(..., description="Time-of-day rendering of sentAt")
    from_me: bool = Field(..., alias="fromMe")
    sender_name: str | None = Field(None, alias="senderName")
    sent_at: datetime = Field(..., alias="sentAt")

    model_config = ConfigDict(populate_by_name=True)
