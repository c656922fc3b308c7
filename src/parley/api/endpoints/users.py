"""User directory endpoint."""

from __future__ import annotations

from zoneinfo import ZoneInfo

from fastapi import APIRouter

from parley.api.dependencies import CurrentUserDep, SessionDep
from parley.core.settings import settings
from parley.db.time import as_utc
from parley.repositories import UserRepository
from parley.schemas.user import UserSummary

router = APIRouter(tags=["users"])

LAST_LOGIN_FORMAT = "%d/%m/%Y %H:%M"


@router.get("/users", response_model=list[UserSummary])
async def list_users(current_user: CurrentUserDep, db: SessionDep) -> list[UserSummary]:
    """List every other user, most recently active first."""
    tz = ZoneInfo(settings.display_timezone)
    return [
        UserSummary(
            user_id=user.user_id,
            username=user.username,
            last_login=(
                as_utc(user.last_login).astimezone(tz).strftime(LAST_LOGIN_FORMAT)
                if user.last_login
                else None
            ),
        )
        for user in UserRepository(db).list_except(current_user.id)
    ]
