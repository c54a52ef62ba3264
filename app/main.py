"""Main FastAPI application."""

from contextlib import asynccontextmanager

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import api_router
from app.config import settings
from app.core.cache import cache_manager
from app.core.logging import setup_logging
from app.db.session import engine, init_db

# Setup logging
setup_logging()

logger = structlog.get_logger(__name__)

# Initialize Sentry for error tracking (only if DSN is properly configured)
if settings.SENTRY_DSN and settings.SENTRY_DSN.startswith("https://"):
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=None,  # Capture all logs
                event_level="ERROR",  # Only send ERROR and above as events
            ),
        ],
        release=settings.APP_VERSION,
        attach_stacktrace=True,
        send_default_pii=False,  # Don't send personally identifiable info
    )
else:
    logger.info("sentry_disabled", reason="SENTRY_DSN not configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    await init_db()
    cache_manager.connect()
    logger.info("app_started", environment=settings.ENVIRONMENT, version=settings.APP_VERSION)
    yield
    # Shutdown
    cache_manager.disconnect()
    await engine.dispose()
    logger.info("app_stopped")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Job board API: jobs, candidate profiles, applications and analytics",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={
        "persistAuthorization": True,  # Persist authorization after page refresh
    },
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials="*" not in settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint."""
    return {
        "message": "Job Portal API is running...",
        "version": settings.APP_VERSION,
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint with cache status."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "cache": cache_manager.get_stats(),
    }


def _format_validation_error(error: dict) -> str:
    """One readable line per failing field, e.g. ``title: String should have at most 100 characters``."""
    message = error.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    return f"{'.'.join(location)}: {message}" if location else message


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as ``{"message": ...}``."""
    message = exc.detail
    if exc.status_code == 404 and message == "Not Found":
        # No route matched
        message = f"Not Found - {request.url.path}"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as 400 with one message per field."""
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.info("request_validation_failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=400,
        content={"message": "Validation Error", "errors": errors},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal server error",
            "error": str(exc) if settings.DEBUG else None,
        },
    )
