"""
Avatar proxy endpoint.

Resolves an external (Roblox) username to a thumbnail URL server side
so the browser does not need a cross‑origin call.
"""

from fastapi import APIRouter, Depends

from survey_portal_api.app.api.deps import get_avatar_service
from survey_portal_api.app.schemas.survey import AvatarRead
from survey_portal_api.app.services.avatar_service import AvatarService

router = APIRouter()


@router.get("/avatar/{username}", response_model=AvatarRead)
def resolve_avatar(username: str, service: AvatarService = Depends(get_avatar_service)) -> AvatarRead:
    """Return ``{"imageUrl": ...}`` for ``username``.

    404 when the user or its image does not exist, 502 when the
    upstream service fails.
    """
    return AvatarRead(image_url=service.resolve_avatar(username))
