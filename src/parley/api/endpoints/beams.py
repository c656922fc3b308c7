"""Push-notification device binding endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from parley.api.dependencies import CurrentUserDep, PushNotifierDep
from parley.core.errors import Unauthorized

router = APIRouter(tags=["notifications"])


@router.get("/beams")
async def beams_token(
    current_user: CurrentUserDep,
    notifier: PushNotifierDep,
    user_id: Annotated[str | None, Query()] = None,
) -> dict[str, str]:
    """Return a Beams auth token for the caller's own push identity."""
    if not user_id or user_id != current_user.external_id:
        raise Unauthorized()
    if not notifier.enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications are not configured",
        )
    return notifier.generate_token(current_user.external_id)
