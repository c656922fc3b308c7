"""Pusher Beams client for best-effort push notifications.

Only private messages trigger a push. Delivery is addressed by the
recipient's ``external_id`` and any failure surfaces as
``NotificationError`` for the caller to swallow.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

import httpx
from jose import jwt

from parley.core.errors import NotificationError
from parley.core.settings import settings

logger = logging.getLogger(__name__)

PRIVATE_MESSAGE_TYPE = "private_message"
HTTP_BAD_REQUEST = 400


@dataclass(frozen=True)
class PushConfig:
    """Immutable configuration for push delivery."""

    instance_id: str | None
    secret_key: str | None
    icon_url: str
    deep_link_template: str
    timeout_seconds: float
    token_ttl_seconds: int

    @property
    def enabled(self) -> bool:
        return bool(self.instance_id and self.secret_key)

    @property
    def base_url(self) -> str:
        return f"https://{self.instance_id}.pushnotifications.pusher.com"


def load_push_config() -> PushConfig:
    """Build configuration object from global settings."""
    return PushConfig(
        instance_id=settings.pusher_instance_id,
        secret_key=settings.pusher_secret_key,
        icon_url=settings.push_icon_url,
        deep_link_template=settings.push_deep_link_template,
        timeout_seconds=float(settings.push_timeout_seconds),
        token_ttl_seconds=settings.beams_token_ttl_seconds,
    )


@dataclass(frozen=True)
class PrivateMessagePush:
    """Everything needed to announce one private message to its recipient."""

    recipient_external_id: str
    recipient_id: int
    sender_id: int
    sender_name: str
    message_id: int
    content: str

    def web_payload(self, config: PushConfig) -> dict[str, Any]:
        """Return the ``web`` section of a Beams publish request."""
        notification: dict[str, Any] = {
            "title": self.sender_name,
            "body": self.content,
            "deep_link": config.deep_link_template.format(sender_id=self.sender_id),
        }
        if config.icon_url:
            notification["icon"] = config.icon_url
        return {
            "notification": notification,
            "data": {
                "sender_id": str(self.sender_id),
                "recipient_id": str(self.recipient_id),
                "message_id": str(self.message_id),
                "type": PRIVATE_MESSAGE_TYPE,
            },
        }


class PushNotifier:
    """HTTP client wrapper for the Beams publish and auth APIs."""

    def __init__(
        self,
        config: PushConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_push_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def publish_to_users(self, user_ids: list[str], web: dict[str, Any]) -> dict[str, Any]:
        """Publish a web notification to the given Beams user ids.

        Raises:
            NotificationError: On network failure or a non-success response.
        """
        client = await self._ensure_client()
        path = f"/publish_api/v1/instances/{self.config.instance_id}/publishes/users"
        try:
            response = await client.post(
                path,
                json={"users": user_ids, "web": web},
                headers={"Authorization": f"Bearer {self.config.secret_key}"},
            )
        except httpx.HTTPError as exc:
            raise NotificationError(f"Beams request failed: {exc}") from exc
        if response.status_code >= HTTP_BAD_REQUEST:
            raise NotificationError(f"Beams responded with {response.status_code}")
        try:
            body = response.json()
        except ValueError as exc:
            raise NotificationError("Beams returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise NotificationError("Beams returned an unexpected body")
        return body

    async def notify_private_message(self, push: PrivateMessagePush) -> None:
        """Announce a private message to its recipient.

        Does nothing when push credentials are not configured.
        """
        if not self.enabled:
            logger.debug("Push disabled, skipping notification for message %s", push.message_id)
            return
        result = await self.publish_to_users(
            [push.recipient_external_id],
            push.web_payload(self.config),
        )
        logger.info(
            "Push published for message %s (publish id %s)",
            push.message_id,
            result.get("publishId"),
        )

    def generate_token(self, external_id: str) -> dict[str, str]:
        """Mint a Beams auth token binding a device to ``external_id``.

        Raises:
            NotificationError: If push credentials are not configured.
        """
        if not self.enabled:
            raise NotificationError("Push notifications are not configured")
        now = int(time.time())
        claims = {
            "sub": external_id,
            "iss": self.config.base_url,
            "exp": now + max(1, self.config.token_ttl_seconds),
        }
        token = jwt.encode(claims, self.config.secret_key, algorithm="HS256")
        return {"token": token}

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _PushNotifierSingleton:
    """Singleton wrapper for PushNotifier."""

    _instance: PushNotifier | None = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> PushNotifier:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = PushNotifier()
        return cls._instance


def get_push_notifier() -> PushNotifier:
    """Return a singleton push notifier instance."""
    return _PushNotifierSingleton.get_instance()
