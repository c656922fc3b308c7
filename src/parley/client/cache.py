"""Client-side message cache with optimistic sends.

Each conversation key (a room id or a counterpart user id, as a string)
owns an ordered message list and the time of its last network fetch.
Fetched lists are reused for ``ttl_seconds``. Sends append a provisional
entry immediately and reconcile it once the server answers:

* success replaces the provisional entry in place with the confirmed one;
* failure removes it, leaving the list as if nothing had been sent.

A fetch that completes while a send is in flight keeps the provisional
entry, and a fetch response older than one already applied is dropped.
All mutations are expected to run on a single event loop.
"""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Literal

from parley.client.api import ChatApiClient
from parley.schemas.message import MessageView

logger = logging.getLogger(__name__)

ConversationKind = Literal["room", "user"]

DEFAULT_TTL_SECONDS = 5 * 60
TEMP_ID_PREFIX = "temp-"


def time_label(moment: datetime) -> str:
    """Render a timestamp as a local time of day."""
    return moment.astimezone().strftime("%X")


@dataclass(frozen=True)
class CachedMessage:
    """View-model of one message as held by the client."""

    id: str
    text: str
    time: str
    from_me: bool
    sender_name: str | None = None
    sent_at: datetime | None = None
    pending: bool = False

    @classmethod
    def from_view(cls, view: MessageView) -> CachedMessage:
        return cls(
            id=view.id,
            text=view.text,
            time=view.time,
            from_me=view.from_me,
            sender_name=view.sender_name,
            sent_at=view.sent_at,
        )


@dataclass
class _Conversation:
    messages: list[CachedMessage] = field(default_factory=list)
    last_fetch: float | None = None
    issued_fetches: int = 0
    applied_fetch: int = 0


class MessageCache:
    """Per-conversation message lists with freshness and optimistic updates."""

    def __init__(
        self,
        api: ChatApiClient,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sender_name: str | None = None,
    ) -> None:
        self.api = api
        self.ttl_seconds = ttl_seconds
        self.sender_name = sender_name
        self._clock = clock
        self._conversations: dict[str, _Conversation] = {}
        self._pending: dict[str, dict[str, CachedMessage]] = {}
        self._temp_ids = itertools.count(1)
        self._epoch = 0

    def messages(self, key: str) -> list[CachedMessage]:
        """Return a copy of the cached list for ``key`` (empty if unknown)."""
        conversation = self._conversations.get(key)
        return list(conversation.messages) if conversation else []

    def is_fresh(self, key: str) -> bool:
        conversation = self._conversations.get(key)
        if conversation is None or conversation.last_fetch is None:
            return False
        return self._clock() - conversation.last_fetch < self.ttl_seconds

    def pending_ids(self, key: str) -> list[str]:
        """Return temporary ids of sends still awaiting a server answer."""
        return list(self._pending.get(key, {}))

    async def fetch(self, key: str, kind: ConversationKind) -> list[CachedMessage]:
        """Return the messages of a conversation, from cache when still fresh."""
        if self.is_fresh(key):
            logger.debug("Messages for %s served from cache", key)
            return self.messages(key)

        conversation = self._conversations.setdefault(key, _Conversation())
        conversation.issued_fetches += 1
        ticket = conversation.issued_fetches
        epoch = self._epoch

        if kind == "user":
            views = await self.api.fetch_private_messages(key)
        else:
            views = await self.api.fetch_room_messages(key)

        if epoch != self._epoch:
            logger.debug("Dropping fetch for %s that completed after the cache was cleared", key)
            return self.messages(key)
        conversation = self._conversations.setdefault(key, _Conversation())
        if ticket <= conversation.applied_fetch:
            logger.warning("Discarding stale fetch response for %s", key)
            return self.messages(key)

        fetched = [CachedMessage.from_view(view) for view in views]
        fetched_ids = {message.id for message in fetched}
        still_pending = [
            message
            for message in conversation.messages
            if message.id in self._pending.get(key, {}) and message.id not in fetched_ids
        ]
        conversation.messages = fetched + still_pending
        conversation.last_fetch = self._clock()
        conversation.applied_fetch = ticket
        return self.messages(key)

    def force_refresh(self, key: str) -> None:
        """Make the next fetch for ``key`` bypass the cache."""
        conversation = self._conversations.get(key)
        if conversation is not None:
            conversation.last_fetch = None

    def add_optimistic_message(self, key: str, text: str) -> CachedMessage:
        """Append a provisional message authored locally and return it."""
        now = datetime.now(UTC)
        message = CachedMessage(
            id=f"{TEMP_ID_PREFIX}{next(self._temp_ids)}",
            text=text,
            time=time_label(now),
            from_me=True,
            sender_name=self.sender_name,
            sent_at=now,
            pending=True,
        )
        self._conversations.setdefault(key, _Conversation()).messages.append(message)
        self._pending.setdefault(key, {})[message.id] = message
        return message

    def replace_optimistic_message(self, key: str, temp_id: str, confirmed: CachedMessage) -> bool:
        """Swap a provisional entry for its confirmed version, keeping its position.

        If a fetch already delivered the confirmed message, the provisional
        entry is dropped instead so the id is not listed twice.
        """
        self._pending.get(key, {}).pop(temp_id, None)
        conversation = self._conversations.get(key)
        if conversation is None:
            return False
        ids = [message.id for message in conversation.messages]
        if temp_id not in ids:
            return False
        if confirmed.id in ids:
            conversation.messages.pop(ids.index(temp_id))
        else:
            conversation.messages[ids.index(temp_id)] = confirmed
        return True

    def remove_optimistic_message(self, key: str, temp_id: str) -> bool:
        """Drop a provisional entry after a failed send."""
        self._pending.get(key, {}).pop(temp_id, None)
        conversation = self._conversations.get(key)
        if conversation is None:
            return False
        before = len(conversation.messages)
        conversation.messages = [m for m in conversation.messages if m.id != temp_id]
        return len(conversation.messages) != before

    async def send(self, key: str, kind: ConversationKind, content: str) -> CachedMessage:
        """Send ``content`` to a conversation with an optimistic local echo.

        Raises:
            ApiError: If the server rejects the message; the echo is removed first.
        """
        target = int(key)
        provisional = self.add_optimistic_message(key, content)
        try:
            if kind == "user":
                ack = await self.api.send_message(content, recipient_id=target)
            else:
                ack = await self.api.send_message(content, room_id=target)
        except Exception:
            self.remove_optimistic_message(key, provisional.id)
            raise

        confirmed = replace(
            provisional,
            id=str(ack.message_id),
            time=time_label(ack.sent_at),
            sent_at=ack.sent_at,
            pending=False,
        )
        self.replace_optimistic_message(key, provisional.id, confirmed)
        return confirmed

    def clear(self, key: str) -> None:
        """Forget one conversation's messages and freshness.

        Fetches already in flight for ``key`` are dropped when they land.
        """
        conversation = self._conversations.get(key)
        if conversation is not None:
            conversation.messages = []
            conversation.last_fetch = None
            conversation.applied_fetch = conversation.issued_fetches
        self._pending.pop(key, None)

    def clear_all(self) -> None:
        """Forget every conversation, as on logout."""
        self._conversations.clear()
        self._pending.clear()
        self._epoch += 1
