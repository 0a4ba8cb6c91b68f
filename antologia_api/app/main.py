"""
Main entrypoint for the Antologia API.

This module assembles the FastAPI application, sets up logging, CORS,
error handlers and includes the versioned router.  The ``create_app``
function builds and configures the app, which is then instantiated at
module import time as ``app``.  Importing the app here makes it easy to
run with uvicorn or another ASGI server, e.g.::

    uvicorn antologia_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import get_connection
from .core.exceptions import AntologiaError
from .core.logging_config import setup_logging
from .services.lifecycle_service import LifecycleService


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Apply migrations and seed an empty store once per process.
    conn = get_connection(app.state.database_path)
    try:
        await LifecycleService.initialize(conn)
    finally:
        conn.close()
    logger.info("Server started (database: %s)", app.state.database_path)
    yield


async def handle_app_error(request: Request, exc: AntologiaError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


async def handle_store_error(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def handle_request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=500, content={"error": details})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed unexpectedly", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or exc.__class__.__name__})


def create_app(
    database_path: Optional[str] = None,
    export_dir: Optional[str] = None,
    max_import_bytes: Optional[int] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    database_path : Optional[str]
        SQLite file used by this application instance.  Defaults to
        ``settings.database_url``.
    export_dir : Optional[str]
        Directory for temporary export files.  Defaults to
        ``settings.export_dir``.
    max_import_bytes : Optional[int]
        Size limit for import bodies.  Defaults to
        ``settings.max_import_bytes``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that startup can log.
    setup_logging(
        settings.log_level,
        settings.log_file or None,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.database_path = database_path or settings.database_url
    app.state.export_dir = export_dir or settings.export_dir
    app.state.max_import_bytes = max_import_bytes or settings.max_import_bytes

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AntologiaError, handle_app_error)
    app.add_exception_handler(sqlite3.Error, handle_store_error)
    app.add_exception_handler(RequestValidationError, handle_request_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # The public paths predate versioning, so v1 is mounted at the root.
    app.include_router(v1_router)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
