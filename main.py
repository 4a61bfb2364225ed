import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.core.config import Settings, settings as default_settings
from app.core.database import init_db
from app.core.exceptions import AppError, InternalError, ValidationError
from app.core.logging_config import setup_logging
from app.core.security import PasswordHasher, TokenService
from app.api.endpoints import applications, auth, categories, health, jobs, matches, profiles, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS, service=settings.PROJECT_NAME)
    logger.info("Starting up Job Match API...")
    logger.info("Initializing database...")
    init_db(default_categories=settings.DEFAULT_CATEGORIES)
    logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down Job Match API...")


def _error_body(error: AppError) -> dict:
    return {"error": error.error_code, "detail": error.message}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    body = _error_body(exc)
    if isinstance(exc, ValidationError):
        body["fields"] = exc.fields
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's body/query validation failures as ValidationError."""
    fields = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return await app_error_handler(request, ValidationError(fields))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=_error_body(error))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Configuration is read once here; the password hasher and token service
    are constructed from it and shared through ``app.state``.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Job matching marketplace API for job seekers and shop owners",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.password_hasher = PasswordHasher.from_settings(settings)
    app.state.token_service = TokenService.from_settings(settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(health.router, prefix=settings.API_V1_STR)
    app.include_router(auth.router, prefix=settings.API_V1_STR)
    app.include_router(users.router, prefix=settings.API_V1_STR)
    app.include_router(profiles.router, prefix=settings.API_V1_STR)
    app.include_router(categories.router, prefix=settings.API_V1_STR)
    app.include_router(jobs.router, prefix=settings.API_V1_STR)
    app.include_router(applications.router, prefix=settings.API_V1_STR)
    app.include_router(matches.router, prefix=settings.API_V1_STR)

    @app.get("/")
    async def root():
        """Root endpoint - API health check"""
        return {
            "message": settings.PROJECT_NAME,
            "version": "1.0.0",
            "status": "healthy"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
