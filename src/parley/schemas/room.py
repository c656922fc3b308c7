"""Room-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class RoomResponse(BaseModel):
    """Room listing entry."""

    room_id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
