"""
Main entrypoint for the Survey Portal API.

This module assembles the FastAPI application, sets up logging, wires
the services and includes the versioned router.  ``create_app`` builds
and configures the app from a ``Settings`` instance; a default app is
created at import time so it can be served directly, e.g.::

    uvicorn survey_portal_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.errors import ServiceError, UpstreamError
from .core.logging_config import setup_logging
from .core.rate_limit import RateLimiter
from .core.sessions import SessionManager, SessionStore
from .core.store import JsonFileRecordStore, RecordStore
from .services.auth_service import AuthService
from .services.avatar_service import AvatarLookup, AvatarService, RobloxAvatarLookup
from .services.survey_service import SurveyService

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    """Map every failure to ``{"error": message}`` with a proper status."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if isinstance(exc, UpstreamError):
            logger.warning("Upstream failure on %s: %s", request.url.path, exc.detail or exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Malformed request"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal error"})


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[RecordStore] = None,
    avatar_lookup: Optional[AvatarLookup] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the environment‑based
        ``settings`` instance.
    store : Optional[RecordStore]
        Record store override; defaults to JSON files under
        ``settings.data_dir``.
    avatar_lookup : Optional[AvatarLookup]
        Upstream avatar lookup override; defaults to the Roblox APIs.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the components
    # below can safely log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    store = store or JsonFileRecordStore(settings.resolve_data_dir())
    avatar_lookup = avatar_lookup or RobloxAvatarLookup(
        settings.avatar_id_lookup_url,
        settings.avatar_thumbnail_url,
        thumbnail_size=settings.avatar_thumbnail_size,
        timeout=settings.upstream_timeout,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Create missing collection files; a corrupt one aborts startup.
        store.ensure_collections()
        logger.info("%s %s started", settings.project_name, settings.api_version)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.sessions = SessionManager(SessionStore(settings.session_ttl_seconds), settings)
    app.state.rate_limiter = RateLimiter(settings.auth_rate_limit, settings.auth_rate_window_seconds)
    app.state.auth_service = AuthService(store, password_iterations=settings.password_hash_iterations)
    app.state.avatar_service = AvatarService(avatar_lookup)
    app.state.survey_service = SurveyService(store)

    origins = settings.cors_origin_list()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers refuse credentialed requests to a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(v1_router, prefix="/api")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
