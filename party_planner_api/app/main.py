"""
Main entrypoint for the Party Planner API.

This module assembles the FastAPI application, sets up logging, the
store handle, the error handlers and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Importing the app here
makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn party_planner_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import Database
from .core.errors import AppError, CapacityError, MissingField, ValidationError
from .core.logging_config import setup_logging
from .schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

# Documented error bodies for every versioned route
ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_409_CONFLICT,
    )
}


def _register_error_handlers(app: FastAPI, app_settings: Settings) -> None:
    """Render every error as ``{"error": message}``."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        status_code = exc.status_code
        if isinstance(exc, CapacityError):
            status_code = app_settings.capacity_exceeded_status
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if any(error.get("type") == "missing" for error in errors):
            message = MissingField.default_message
        else:
            message = ValidationError.default_message
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message, "details": jsonable_encoder(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Details stay in the log; clients only get a generic message.
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    This function performs one-time setup tasks such as configuring
    logging, constructing the store handle and including versioned API
    routers.  It returns a fully configured FastAPI instance ready to
    be served.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to build the app with.  Defaults to the settings read
        from the environment; tests pass their own (e.g. a temporary
        database file).

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings

    # Initialise logging before anything else so that the modules below
    # can safely log messages.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version, debug=app_settings.debug)
    app.state.settings = app_settings
    app.state.db = Database(app_settings.database_url, timeout=app_settings.db_timeout_seconds)

    _register_error_handlers(app, app_settings)

    @app.middleware("http")
    async def request_timeout(request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=app_settings.request_timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("%s %s timed out", request.method, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": "Request timed out"},
            )

    # Mount versioned routes under /api/v1.  Additional versions can be
    # added later by including their respective routers with a
    # different prefix.
    app.include_router(v1_router, prefix="/api/v1", responses=ERROR_RESPONSES)

    # Open the store (applying migrations) at startup and release it at
    # shutdown.
    @app.on_event("startup")
    async def startup_event() -> None:
        app.state.db.open()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        app.state.db.close()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
