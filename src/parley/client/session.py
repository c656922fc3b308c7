"""Client session: the bearer token plus the message cache bound to it."""

from __future__ import annotations

import logging

from parley.client.api import ChatApiClient, ClientConfig
from parley.client.cache import MessageCache
from parley.schemas.user import SessionResponse

logger = logging.getLogger(__name__)


class ChatSession:
    """Logged-in state of one client.

    Logging out only forgets local state. The server-side session stays
    valid until its TTL runs out, so a copied token keeps working.
    """

    def __init__(self, api: ChatApiClient) -> None:
        self.api = api
        self.cache = MessageCache(api, ttl_seconds=api.config.cache_ttl_seconds)
        self.identity: SessionResponse | None = None

    @classmethod
    def connect(cls, config: ClientConfig) -> ChatSession:
        return cls(ChatApiClient(config))

    @property
    def is_authenticated(self) -> bool:
        return self.api.token is not None

    def _adopt(self, identity: SessionResponse) -> SessionResponse:
        self.identity = identity
        self.cache.sender_name = identity.username
        return identity

    async def signup(self, username: str, email: str, password: str) -> SessionResponse:
        return self._adopt(await self.api.signup(username, email, password))

    async def login(self, username: str, password: str) -> SessionResponse:
        return self._adopt(await self.api.login(username, password))

    def logout(self) -> str | None:
        """Clear the token and every cached conversation; return the old token."""
        token = self.api.token
        self.api.token = None
        self.identity = None
        self.cache.clear_all()
        self.cache.sender_name = None
        logger.info("Logged out locally")
        return token

    async def close(self) -> None:
        await self.api.close()
