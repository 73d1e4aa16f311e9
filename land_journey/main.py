"""Land Journey Engine: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# configure_structlog MUST be called before all other app imports
# (structlog caches the processor chain on first use).
from land_journey.core.logging import configure_structlog
from land_journey.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from land_journey.api.routes import api_router
from land_journey.core.config import get_settings
from land_journey.core.exceptions import LandJourneyError
from land_journey.db import init_db, close_db
from land_journey.middleware.correlation import (
    setup_correlation_middleware,
    get_correlation_id,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # SIGTERM flips this so /api/health returns 503 while connections drain
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    await init_db()
    logger.info("db_initialized")

    yield

    logger.info("shutdown_begin")
    await close_db()
    logger.info("shutdown_complete")


def _error_response(
    request: Request,
    status_code: int,
    event: str,
    body: dict,
    **context,
) -> JSONResponse:
    """Log the failure with a fresh debug_id and echo that id to the client.

    Server errors log at error level, client errors at warning level.
    """
    debug_id = str(uuid.uuid4())
    log = logger.error if status_code >= 500 else logger.warning
    log(
        event,
        status_code=status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        method=request.method,
        path=request.url.path,
        user_id=getattr(request.state, "user_id", None),
        **context,
    )
    return JSONResponse(status_code=status_code, content={**body, "debug_id": debug_id})


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(
        request, exc.status_code, "http_exception", {"detail": exc.detail}, detail=exc.detail
    )


async def land_journey_error_handler(request: Request, exc: LandJourneyError) -> JSONResponse:
    """Map domain errors to their HTTP status with a stable error code."""
    return _error_response(
        request,
        exc.status_code,
        "land_journey_error",
        {"detail": exc.message, "code": exc.code},
        code=exc.code,
        detail=exc.message,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: full traceback in the log, nothing internal in the body."""
    return _error_response(
        request,
        500,
        "unhandled_exception",
        {"detail": "Internal server error"},
        error_type=type(exc).__name__,
        error=str(exc),
        exc_info=exc,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(LandJourneyError, land_journey_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Post-purchase land acquisition journey tracking",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(dict.fromkeys([settings.frontend_url, *settings.cors_allowed_origins])),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Correlation ID middleware (runs first on incoming requests)
    setup_correlation_middleware(app)

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "land_journey.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
