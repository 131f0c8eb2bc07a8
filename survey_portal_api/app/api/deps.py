"""
FastAPI dependencies resolving the services built by ``create_app``.

The services live on ``app.state`` so each application instance (and
each test) has its own store, session table and avatar lookup.
"""

from fastapi import Request

from ..services.auth_service import AuthService
from ..services.avatar_service import AvatarService
from ..services.survey_service import SurveyService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_avatar_service(request: Request) -> AvatarService:
    return request.app.state.avatar_service


def get_survey_service(request: Request) -> SurveyService:
    return request.app.state.survey_service
