"""Room listing endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from parley.api.dependencies import CurrentUserDep, SessionDep
from parley.models import Room
from parley.schemas.room import RoomResponse

router = APIRouter(tags=["rooms"])


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(current_user: CurrentUserDep, db: SessionDep) -> list[Room]:
    """List every room."""
    return db.query(Room).order_by(Room.room_id).all()
