"""Message dispatch and history retrieval."""

from __future__ import annotations

import logging
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError

from parley.core.errors import NotificationError
from parley.core.settings import settings
from parley.repositories import MessageRepository, MessageRow, UserRepository
from parley.schemas.message import MessageCreate, MessageSent, MessageView
from parley.schemas.user import SessionUser
from parley.services.notifications import PrivateMessagePush, PushNotifier

logger = logging.getLogger(__name__)


def format_time_of_day(row: MessageRow) -> str:
    """Render ``sent_at`` as a time of day in the display timezone."""
    local = row.sent_at.astimezone(ZoneInfo(settings.display_timezone))
    return local.strftime(settings.time_format)


def to_message_view(row: MessageRow, viewer_id: int) -> MessageView:
    """Map a storage row to the display view-model for ``viewer_id``."""
    return MessageView(
        id=str(row.message_id),
        text=row.content,
        time=format_time_of_day(row),
        from_me=row.sender_id == viewer_id,
        sender_name=row.sender_username,
        sent_at=row.sent_at,
    )


class MessageService:
    """Send and read room or private messages on behalf of a session user."""

    def __init__(
        self,
        messages: MessageRepository,
        users: UserRepository,
        notifier: PushNotifier,
    ) -> None:
        self.messages = messages
        self.users = users
        self.notifier = notifier

    async def dispatch(self, sender: SessionUser, payload: MessageCreate) -> MessageSent:
        """Persist a validated message and notify the recipient if private.

        The insert is the commit point. Anything after it is best effort and
        cannot fail the call.

        Raises:
            StorageError: If the insert fails.
        """
        message_id, sent_at = self.messages.insert(
            sender_id=sender.id,
            content=payload.content,
            room_id=payload.room_id,
            recipient_id=payload.recipient_id,
        )
        if payload.is_private:
            logger.info(
                "Message %s sent by user %s to user %s",
                message_id,
                sender.id,
                payload.recipient_id,
            )
            await self._notify_recipient(sender, payload.recipient_id, payload.content, message_id)
        else:
            logger.info("Message %s sent by user %s to room %s", message_id, sender.id, payload.room_id)
        return MessageSent(message_id=message_id, sent_at=sent_at)

    async def _notify_recipient(
        self,
        sender: SessionUser,
        recipient_id: int,
        content: str,
        message_id: int,
    ) -> None:
        try:
            recipient = self.users.get_by_id(recipient_id)
            if recipient is None:
                logger.debug("No recipient %s to notify", recipient_id)
                return
            await self.notifier.notify_private_message(
                PrivateMessagePush(
                    recipient_external_id=recipient.external_id,
                    recipient_id=recipient.user_id,
                    sender_id=sender.id,
                    sender_name=sender.username,
                    message_id=message_id,
                    content=content,
                )
            )
        except (NotificationError, SQLAlchemyError) as exc:
            logger.warning("Push notification for message %s failed: %s", message_id, exc)
        except Exception:
            logger.warning("Push notification for message %s failed", message_id, exc_info=True)

    def room_history(self, viewer: SessionUser, room_id: int) -> list[MessageView]:
        """Return the full history of a room, oldest first."""
        rows = self.messages.list_by_room(room_id)
        return [to_message_view(row, viewer.id) for row in rows]

    def private_history(self, viewer: SessionUser, counterpart_id: int) -> list[MessageView]:
        """Return the private conversation between the viewer and a counterpart."""
        rows = self.messages.list_by_pair(viewer.id, counterpart_id)
        return [to_message_view(row, viewer.id) for row in rows]
