"""
HISS Backend — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn hiss.main:app, or
       python -m hiss).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Request ID → Access Log → GZip → CORS      │
    │                                                          │
    │  Routes:                                                 │
    │    /values   /radiology/...   /features/...   /health    │
    │    /  (static front-end, when static_dir exists)         │
    │                                                          │
    │  Exception Handlers:                                     │
    │    BadRequest→400  NotFound→404  Store→500  Busy→503     │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create tables
    Shutdown: dispose database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from hiss import __version__
from hiss.config import settings
from hiss.database import create_schema, dispose_engine
from hiss.exceptions import (
    BadRequestError,
    HissError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
)
from hiss.middleware.logging import RequestLoggingMiddleware
from hiss.middleware.request_id import (
    RequestIDMiddleware,
    request_id_var,
    unexpected_error_response,
)
from hiss.routes import features, health, radiology, values

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] hiss.access: GET /values 200 1.2ms [a1b2c3d4] from 10.0.0.5
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's; SQL echo is opt-in via DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("HISS backend %s starting up...", __version__)

    if settings.db_create_schema:
        await create_schema()
        logger.info("Database schema ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("HISS backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(code: str, message: str, details: dict | None = None) -> dict:
    body = {"error": code, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the ErrorResponse body.

    Handler hierarchy:
        BadRequestError         → 400 Bad Request
        NotFoundError           → 404 Not Found
        StoreUnavailableError   → 503 Service Unavailable (Retry-After)
        StoreError              → 500 Internal Server Error (generic message)
        HissError (base)        → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error (rendered by
                                  RequestIDMiddleware for route errors)

    Store error bodies never carry SQL or driver detail; that is logged.
    """

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        logger.warning("[%s] Bad request: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("bad_request", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message, exc.context),
        )

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error("[%s] Store unavailable: %s", request_id_var.get(""), exc.context)
        return JSONResponse(
            status_code=503,
            content=_error_body("service_unavailable", exc.message),
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(HissError)
    async def handle_app_error(request: Request, exc: HissError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Last-resort catch-all for failures outside RequestIDMiddleware (which
        renders unhandled route errors itself). The stack trace is logged,
        never returned.
        """
        logger.error("Unexpected error outside the request scope: %s", str(exc), exc_info=True)
        return unexpected_error_response(request_id_var.get(""))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="HISS API",
        description=(
            "Structured annotation of radiology reports: stroke, angiography and "
            "degenerative findings validated against controlled vocabularies."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    # Report pages are large text payloads
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(values.router)
    app.include_router(radiology.router)
    app.include_router(features.router)
    app.include_router(health.router)

    # Mounted last so it only answers paths no API route claimed
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info("Serving front-end from %s", static_dir.resolve())

    return app


# uvicorn expects `hiss.main:app` to be importable
app = create_app()
