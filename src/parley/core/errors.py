"""Error taxonomy shared by the API handlers and services."""

from __future__ import annotations

from fastapi import status


class ParleyError(RuntimeError):
    """Base class for failures rendered as ``{"code", "message"}`` payloads."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body sent to the caller."""
        return {"code": self.code, "message": self.message}


class Unauthorized(ParleyError):
    """Missing, malformed or expired bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Session expired"


class ValidationError(ParleyError):
    """A required field is missing or an identifier is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class Conflict(ParleyError):
    """A unique user attribute is already taken."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "Resource already exists"

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class StorageError(ParleyError):
    """The relational store is unavailable or rejected a write.

    The message handed to the constructor is kept for server-side logs only;
    callers always see the generic payload.
    """

    code = "STORAGE_ERROR"

    def to_payload(self) -> dict[str, str]:
        return {"code": self.code, "message": self.default_message}


class SessionStoreError(ParleyError):
    """The session key-value store could not be reached."""

    code = "SESSION_STORE_ERROR"

    def to_payload(self) -> dict[str, str]:
        return {"code": self.code, "message": self.default_message}


class NotificationError(ParleyError):
    """Best-effort push delivery failed. Never surfaced to API callers."""

    code = "NOTIFICATION_ERROR"
