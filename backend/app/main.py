"""
Realty CRM API - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐       │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │       │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘       │
    │                                                     │
    │  Routes (each behind auth → role → validation):     │
    │  ┌──────────────────┐ ┌──────────────────────────┐  │
    │  │ /api/v1/clients  │ │ /api/v1/transactions     │  │
    │  └──────────────────┘ └──────────────────────────┘  │
    │  ┌──────────────────┐                               │
    │  │ /api/v1/health   │  (public)                     │
    │  └──────────────────┘                               │
    │                                                     │
    │  Exception Handlers:                                │
    │  400 validation │ 401 │ 403 │ 404 │ 500 internal    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check
    Shutdown: dispose the database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from app.guards.validation import BODY_ERROR, format_errors
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import clients, health, transactions

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Containers capture stdout
        ],
        force=True,  # Override any existing logging config
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, report configuration problems.
    Shutdown: dispose the shared engine.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Realty CRM API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: health checks must stay reachable while misconfigured
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Realty CRM API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler table:
        ValidationError         → 400 {"error", "details"}
        RequestValidationError  → 400 {"error", "details"}
        UnauthenticatedError    → 401 {"message": "Unauthorized"}
        ForbiddenError          → 403 {"message": "Forbidden"}
        NotFoundError           → 404 {"error": "<Resource> not found"}
        DatabaseError           → 500 {"error": "Internal server error"}
        Exception (fallback)    → 500 {"error": "Internal server error"}

    Internal details (stack traces, SQL, token contents) are logged only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info(
            "[%s] %s: %d violation(s)", request_id_var.get(""), exc.message, len(exc.details)
        )
        return JSONResponse(
            status_code=400,
            content={"error": exc.message, "details": exc.details},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """FastAPI's own parameter validation, reshaped to our 400 body."""
        return JSONResponse(
            status_code=400,
            content={"error": BODY_ERROR, "details": format_errors(list(exc.errors()))},
        )

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        return JSONResponse(
            status_code=401,
            content={"message": "Unauthorized"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return JSONResponse(status_code=403, content={"message": "Forbidden"})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: full stack trace to the log, generic body to the client."""
        logger.error(
            "[%s] Unexpected error on %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Realty CRM API",
        description=(
            "Clients and transactions for real-estate agents. Every record is "
            "owned by the authenticated caller; writes require the agent or admin role."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost):
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(clients.router)
    app.include_router(transactions.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
