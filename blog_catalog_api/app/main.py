"""
Main entrypoint for the Blog Catalog API.

This module assembles the FastAPI application, sets up logging, builds
the credential manager and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, so it can be served
with::

    uvicorn blog_catalog_api.app.main:app --reload

It is also the single place where domain errors become HTTP responses:
the handlers below map each ``BlogCatalogError`` subclass to its status
code and decide whether the message may be shown to the caller.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .core.config import Settings, settings as default_settings
from .core.db import init_db
from .core.errors import AuthenticationError, BlogCatalogError, ValidationError
from .core.logging_config import setup_logging
from .core.security import CredentialManager
from .api.v1.router import router as v1_router


def _error_response(exc: BlogCatalogError) -> JSONResponse:
    message = exc.message if exc.public else exc.public_message
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=headers)


async def handle_domain_error(request: Request, exc: BlogCatalogError) -> JSONResponse:
    logger = logging.getLogger(__name__)
    reason = getattr(exc, "reason", None)
    if exc.status_code >= 500:
        logger.error(
            "%s error on %s %s: %s", exc.kind, request.method, request.url.path, exc.message, exc_info=exc
        )
    else:
        logger.warning(
            "%s error on %s %s: %s (reason=%s)",
            exc.kind,
            request.method,
            request.url.path,
            exc.message,
            getattr(reason, "value", reason),
        )
    return _error_response(exc)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 validation errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(location) or "body"
    return await handle_domain_error(request, ValidationError(field, first.get("msg", "invalid value")))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger = logging.getLogger(__name__)
    logger.exception("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(BlogCatalogError())


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, constructs the ``CredentialManager`` from the
    settings (stored on ``app.state.credentials``), registers the error
    handlers and includes versioned API routers.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to build the app from.  Defaults to the module level
        settings read from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version)
    app.state.settings = app_settings
    app.state.credentials = CredentialManager.from_settings(app_settings)

    app.add_exception_handler(BlogCatalogError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "ok"}

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        init_db()
        logging.getLogger(__name__).info("Database ready")

    return app


app = create_app()
