"""User and session Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SessionUser(BaseModel):
    """Snapshot of a user stored in the session cache at login time."""

    id: int
    username: str
    email: str | None = None
    external_id: str = Field(..., alias="externalId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SignupRequest(BaseModel):
    """Schema for account creation."""

    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Token and identity returned after signup or login."""

    token: str
    id: int
    username: str
    email: str | None = None
    external_id: str = Field(..., alias="externalId")

    model_config = ConfigDict(populate_by_name=True)


class UserSummary(BaseModel):
    """Entry of the user directory."""

    user_id: int
    username: str
    last_login: str | None = Field(None, description="DD/MM/YYYY HH:MM, or null if never logged in")
