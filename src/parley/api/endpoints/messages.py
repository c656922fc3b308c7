# src/parley/api/endpoints/messages.py
"""Message send and history endpoints for the Parley API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from parley.api.dependencies import CurrentUserDep, MessageServiceDep
from parley.schemas.common import ErrorResponse
from parley.schemas.message import MessageCreate, MessageSent, MessageView

router = APIRouter(tags=["messages"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post("/message", response_model=MessageSent, responses=_ERROR_RESPONSES)
async def send_message(
    message_data: MessageCreate,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
) -> MessageSent:
    """Send a message to a room or to another user.

    The sender is always the session user. Private messages also trigger a
    best-effort push notification to the recipient.
    """
    return await service.dispatch(current_user, message_data)


@router.get("/messages", response_model=list[MessageView], responses=_ERROR_RESPONSES)
async def get_room_messages(
    current_user: CurrentUserDep,
    service: MessageServiceDep,
    room_id: Annotated[int, Query(alias="roomId", gt=0)],
) -> list[MessageView]:
    """Get the full history of a room, oldest first."""
    return service.room_history(current_user, room_id)


@router.get("/private-messages", response_model=list[MessageView], responses=_ERROR_RESPONSES)
async def get_private_messages(
    current_user: CurrentUserDep,
    service: MessageServiceDep,
    recipient_id: Annotated[int, Query(alias="recipientId", gt=0)],
) -> list[MessageView]:
    """Get the private conversation with another user, oldest first."""
    return service.private_history(current_user, recipient_id)
