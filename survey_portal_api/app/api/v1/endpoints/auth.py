"""
Account endpoints: register, login, logout, current user and avatar.

Register and login open a server‑side session and set the session
cookie; logout drops it.  Both credential routes are rate limited per
client.  Handlers are plain ``def`` functions because the record store
does blocking file I/O; FastAPI runs them in its thread pool.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from survey_portal_api.app.api.deps import get_auth_service
from survey_portal_api.app.core.rate_limit import rate_limited
from survey_portal_api.app.core.sessions import get_current_user_id, get_session_manager
from survey_portal_api.app.schemas.survey import OkRead
from survey_portal_api.app.schemas.user import AvatarUpdate, Credentials, IdentityRead, MeRead
from survey_portal_api.app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=IdentityRead, dependencies=[Depends(rate_limited("register"))])
def register(
    credentials: Credentials,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> IdentityRead:
    """Register a local account and log it in."""
    identity = service.register(credentials.username, credentials.password)
    get_session_manager(request).start(request, response, identity.id)
    return IdentityRead(id=identity.id, username=identity.username, avatar_url=identity.avatar_url)


@router.post("/login", response_model=IdentityRead, dependencies=[Depends(rate_limited("login"))])
def login(
    credentials: Credentials,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> IdentityRead:
    """Check credentials and open a session.

    Unknown usernames and wrong passwords get the same 401 response.
    """
    identity = service.login(credentials.username, credentials.password)
    get_session_manager(request).start(request, response, identity.id)
    return IdentityRead(id=identity.id, username=identity.username, avatar_url=identity.avatar_url)


@router.post("/logout", response_model=OkRead)
def logout(request: Request, response: Response) -> OkRead:
    """End the current session; a no‑op for anonymous callers."""
    get_session_manager(request).end(request, response)
    return OkRead()


@router.get("/me", response_model=MeRead, response_model_exclude_none=True)
def me(
    user_id: Optional[int] = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> MeRead:
    identity = service.current_user(user_id)
    if identity is None:
        return MeRead(logged=False)
    return MeRead(logged=True, id=identity.id, username=identity.username, avatar_url=identity.avatar_url)


@router.post("/me/avatar", response_model=OkRead)
def update_avatar(
    body: AvatarUpdate,
    user_id: Optional[int] = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> OkRead:
    """Store an avatar URL (not the image) on the session's user."""
    service.update_avatar(user_id, body.avatar_url)
    return OkRead()
