"""Async HTTP client for the Parley API."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import TypeAdapter

from parley.schemas.message import MessageCreate, MessageSent, MessageView
from parley.schemas.room import RoomResponse
from parley.schemas.user import SessionResponse, UserSummary

logger = logging.getLogger(__name__)

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401

_MESSAGE_LIST = TypeAdapter(list[MessageView])
_USER_LIST = TypeAdapter(list[UserSummary])
_ROOM_LIST = TypeAdapter(list[RoomResponse])


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration for API access from a client."""

    base_url: str
    api_prefix: str = "/api"
    timeout_seconds: float = 10.0
    cache_ttl_seconds: float = 300.0


class ApiError(RuntimeError):
    """Raised when the API rejects a call or cannot be reached.

    ``status_code`` is 0 for network failures.
    """

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(f"{status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


class UnauthorizedError(ApiError):
    """The session token is missing, invalid or expired."""


class ChatApiClient:
    """HTTP client wrapper for Parley endpoints.

    The bearer token is attached to every authenticated call once set.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_data: Any | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        client = await self._ensure_client()
        try:
            response = await client.request(
                method,
                f"{self.config.api_prefix}{path}",
                json=json_data,
                params=params,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            raise ApiError(0, "NETWORK_ERROR", str(exc)) from exc

        if response.status_code >= HTTP_BAD_REQUEST:
            raise self._error_from(response)
        return response.json()

    @staticmethod
    def _error_from(response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        code = str(body.get("code") or "HTTP_ERROR")
        message = str(body.get("message") or body.get("detail") or response.reason_phrase)
        error_cls = UnauthorizedError if response.status_code == HTTP_UNAUTHORIZED else ApiError
        return error_cls(response.status_code, code, message)

    async def signup(self, username: str, email: str, password: str) -> SessionResponse:
        """Create an account; the returned token is adopted for later calls."""
        data = await self._request(
            "POST",
            "/signup",
            json_data={"username": username, "email": email, "password": password},
        )
        session = SessionResponse.model_validate(data)
        self.token = session.token
        return session

    async def login(self, username: str, password: str) -> SessionResponse:
        """Open a session; the returned token is adopted for later calls."""
        data = await self._request(
            "POST",
            "/login",
            json_data={"username": username, "password": password},
        )
        session = SessionResponse.model_validate(data)
        self.token = session.token
        return session

    async def list_users(self) -> list[UserSummary]:
        return _USER_LIST.validate_python(await self._request("GET", "/users"))

    async def list_rooms(self) -> list[RoomResponse]:
        return _ROOM_LIST.validate_python(await self._request("GET", "/rooms"))

    async def fetch_room_messages(self, room_id: int | str) -> list[MessageView]:
        data = await self._request("GET", "/messages", params={"roomId": room_id})
        return _MESSAGE_LIST.validate_python(data)

    async def fetch_private_messages(self, counterpart_id: int | str) -> list[MessageView]:
        data = await self._request("GET", "/private-messages", params={"recipientId": counterpart_id})
        return _MESSAGE_LIST.validate_python(data)

    async def send_message(
        self,
        content: str,
        *,
        room_id: int | None = None,
        recipient_id: int | None = None,
    ) -> MessageSent:
        """Send a message to exactly one of a room or a user."""
        payload = MessageCreate(content=content, room_id=room_id, recipient_id=recipient_id)
        data = await self._request(
            "POST",
            "/message",
            json_data=payload.model_dump(exclude_none=True),
        )
        return MessageSent.model_validate(data)

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
