"""
QuickNotes Backend — FastAPI Application Factory
===================================================

What:  Builds the ASGI app: middleware, error handlers, routers, lifespan.
How:   create_app() assembles a fresh FastAPI instance; the module-level
       `app` is the one uvicorn serves.
Who:   uvicorn (quicknotes.main:app), `python -m quicknotes`, and the tests.

Request path:

    client ─▶ RateLimit ─▶ RequestID ─▶ AccessLog ─▶ GZip ─▶ CORS ─▶ router
                                                                      │
              /api/notes, /api/notes/{id}, /api/notes/create,  ◀──────┤
              /api/notes/update, /api/notes/delete                    │
              /health  ◀──────────────────────────────────────────────┘

Errors raised below the routers become JSON bodies of the form
{"error": <code>, "message": <text>, "request_id": <id>}.

Lifecycle:
    Startup:  configure logging, log the effective database target
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import make_url

from quicknotes import __version__
from quicknotes.config import settings
from quicknotes.database import dispose_engine
from quicknotes.exceptions import (
    DatabaseError,
    NotFoundError,
    QuickNotesError,
)
from quicknotes.middleware.logging import RequestLoggingMiddleware
from quicknotes.middleware.rate_limit import RateLimitMiddleware
from quicknotes.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from quicknotes.routes import health, notes

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that chatter at INFO/DEBUG
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx")


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Route every logger to stdout at LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,  # uvicorn may have configured logging already
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("QuickNotes %s starting", __version__)
    # render_as_string() masks the password by default
    logger.info("Database: %s", make_url(settings.database_url).render_as_string())
    logger.info(
        "Listening on http://%s:%d (docs at /docs)",
        settings.backend_host,
        settings.backend_port,
    )

    yield

    logger.info("QuickNotes shutting down, closing database pool")
    await dispose_engine()


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    """JSON error body tagged with the current request ID."""
    rid = request_id_var.get("")
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "request_id": rid},
        headers={REQUEST_ID_HEADER: rid} if rid else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Exception → response mapping:

        NotFoundError       404  not_found              message passed through
        DatabaseError       500  server_error           generic message
        QuickNotesError     500  server_error           message passed through
        anything else       500  internal_server_error  generic message

    Request validation keeps FastAPI's own 422 body. SQL, context dicts and
    stack traces go to the log only.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("Not found: %s", exc.message)
        return error_response(404, "not_found", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(QuickNotesError)
    async def handle_app_error(request: Request, exc: QuickNotesError):
        logger.error(
            "[%s] Application error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unhandled %s: %s", request_id_var.get(""),
                     type(exc).__name__, exc, exc_info=True)
        return error_response(
            500, "internal_server_error", "An unexpected error occurred."
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="QuickNotes API",
        description="List, create, view, edit, favorite and delete short text notes.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Added innermost first; requests pass them in reverse order
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()
