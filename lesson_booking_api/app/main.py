"""
Main entrypoint for the Lesson Booking API.

This module assembles the FastAPI application: logging, request
logging middleware, routers, error handlers and optional static file
mounts.  ``create_app`` builds the app, which is then instantiated at
module import time as ``app`` so it can be served with::

    uvicorn lesson_booking_api.app.main:app --port 3000

The MongoDB client is opened once on startup and shared by every
request.  Passing a ``store`` to ``create_app`` skips that step, which
is how tests run the API against an in-memory store.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.router import router
from .core.config import Settings, load_store_config, resolve_path, settings
from .core.db import DocumentStore, create_client, open_store
from .core.exceptions import LessonBookingError
from .core.logging_config import log_request, setup_logging

logger = logging.getLogger(__name__)


async def _http_error(request: Request, exc: StarletteHTTPException):
    # Unmatched routes (and missing static files) raise a bare 404.
    if exc.status_code == 404 and exc.detail == "Not Found":
        return PlainTextResponse("Resource not found", status_code=404)
    return await http_exception_handler(request, exc)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Invalid request to %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


async def _service_error(request: Request, exc: LessonBookingError) -> JSONResponse:
    logger.error("Unhandled %s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


def _mount_static(app: FastAPI, app_settings: Settings) -> None:
    if app_settings.images_dir:
        images = resolve_path(app_settings.images_dir)
        if images.is_dir():
            app.mount("/images", StaticFiles(directory=images), name="images")
        else:
            logger.warning("Images directory %s does not exist; not serving /images", images)
    if app_settings.static_dir:
        static = resolve_path(app_settings.static_dir)
        if static.is_dir():
            app.mount("/", StaticFiles(directory=static, html=True), name="static")
        else:
            logger.warning("Static directory %s does not exist; not serving front-end", static)


def create_app(
    store: Optional[DocumentStore] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[DocumentStore]
        Store to serve requests from.  When omitted, a MongoDB store is
        opened on startup from the configured connection details.
    app_settings : Optional[Settings]
        Settings to use instead of the module-level ``settings``.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version)
    app.state.settings = app_settings
    app.state.store = store
    app.state.mongo_client = None

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        log_request(request.method, str(request.url.path))
        return await call_next(request)

    app.include_router(router)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(LessonBookingError, _service_error)
    # Static mounts go last so that "/" does not shadow the API routes.
    _mount_static(app, app_settings)

    @app.on_event("startup")
    async def startup_event() -> None:
        if app.state.store is not None:
            return
        config = load_store_config(app_settings)
        client = create_client(config, app_settings.store_timeout_ms)
        app.state.mongo_client = client
        app.state.store = open_store(client, config)
        logger.info("Using database '%s'", config.db_name)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        if app.state.mongo_client is not None:
            app.state.mongo_client.close()
            app.state.mongo_client = None
            app.state.store = None

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
