"""
Survey and login record endpoints.

``/saveResponse`` and ``/saveLogin`` accept data without a session.
``/download`` returns everything collected so far; it is meant for
local use by whoever runs the demo and should be protected or removed
before exposing the server publicly.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from survey_portal_api.app.api.deps import get_survey_service
from survey_portal_api.app.schemas.survey import ExportRead, OkRead
from survey_portal_api.app.services.survey_service import SurveyService

router = APIRouter()


@router.post("/saveResponse", response_model=OkRead)
def save_response(
    payload: Optional[Dict[str, Any]] = Body(None),
    service: SurveyService = Depends(get_survey_service),
) -> OkRead:
    service.save_response(payload or {})
    return OkRead()


@router.post("/saveLogin", response_model=OkRead)
def save_login(
    payload: Optional[Dict[str, Any]] = Body(None),
    service: SurveyService = Depends(get_survey_service),
) -> OkRead:
    """Record a login attempt.  Passwords are never stored."""
    service.save_login(payload or {})
    return OkRead()


@router.get("/download", response_model=ExportRead)
def download(service: SurveyService = Depends(get_survey_service)) -> ExportRead:
    return ExportRead(**service.export())
