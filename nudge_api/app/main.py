"""
Main entrypoint for the Nudge API.

This module assembles the FastAPI application: logging, the MongoDB
connection, CORS, error rendering, the resource routers, the uploaded
files and the browser page used to smoke-test the API.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn nudge_api.app.main:app --reload

Tests call ``create_app`` directly with their own settings and
connection.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.db import MongoConnection
from .core.error_handlers import add_error_handlers
from .core.logging_config import setup_logging
from .services.upload_service import UploadStorage

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(
    app_settings: Optional[Settings] = None,
    connection: Optional[MongoConnection] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the module level ``settings``.
    connection : Optional[MongoConnection]
        Connection manager to use.  One is built from the settings when
        omitted.  It is connected on startup and closed on shutdown.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    cfg = app_settings or settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(cfg.log_level, cfg.log_file or None)

    connection = connection or MongoConnection(
        cfg.mongodb_uri, cfg.db_name, cfg.mongodb_timeout_ms
    )
    storage = UploadStorage(cfg.upload_dir)

    app = FastAPI(title=cfg.project_name, version=cfg.api_version)
    app.state.settings = cfg
    app.state.connection = connection
    app.state.storage = storage

    add_error_handlers(app)
    # Added last so it wraps everything, including generic 500 responses.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix=cfg.api_prefix)
    app.mount("/uploads", StaticFiles(directory=str(storage.directory)), name="uploads")
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        return {"status": "OK", "message": "Event API is running"}

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html")

    @app.on_event("startup")
    def startup_event() -> None:
        # Exits the process when MongoDB cannot be reached.
        connection.connect()
        logger.info("%s %s ready, API under %s", cfg.project_name, cfg.api_version, cfg.api_prefix)

    @app.on_event("shutdown")
    def shutdown_event() -> None:
        connection.close()
        logger.info("Server closed")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
