"""FastAPI application factory and configuration"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import (
    auth_router,
    question_router,
    user_router,
    leetcode_router,
    codeforces_router,
)
from .config import Settings
from .database import create_engine, create_session_factory, create_db_and_tables
from .exception import DsaTrackerException
from .integrations.platforms import PlatformClient
from .logging import setup_logging
from .schema.response import ErrorResponse, SuccessResponse
from .utils.background import pending_tasks
from .utils.email import EmailService

logger = logging.getLogger(__name__)

# Detached tasks still running at shutdown get this long to finish
SHUTDOWN_GRACE_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    # Startup: Create database tables
    logger.info("Initializing database...")
    await create_db_and_tables(app.state.engine)
    logger.info(f"{app.state.settings.app_name} started")

    yield

    # Shutdown: let in-flight notification tasks finish
    loop = asyncio.get_running_loop()
    tasks = {task for task in pending_tasks() if task.get_loop() is loop}
    if tasks:
        logger.info(f"Waiting for {len(tasks)} background task(s)...")
        _, still_running = await asyncio.wait(tasks, timeout=SHUTDOWN_GRACE_SECONDS)
        for task in still_running:
            task.cancel()

    # Shutdown: Cleanup resources
    await app.state.platform_client.close()
    await app.state.engine.dispose()
    logger.info("Application shutting down")


def create_app(
    settings: Optional[Settings] = None,
    *,
    email_service: Optional[EmailService] = None,
    platform_client: Optional[PlatformClient] = None,
) -> FastAPI:
    """Create and configure FastAPI application instance

    This is the application factory function that initializes logging,
    creates the FastAPI app, configures middleware, registers exception
    handlers, and includes routers.

    Args:
        settings: Application settings; loaded from the environment and the
            instance ``config.toml`` when omitted
        email_service: Outbound email capability (defaults to SMTP)
        platform_client: Third-party platform client (defaults to a real
            HTTP client)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or Settings()

    # Initialize logging first
    setup_logging(Path(settings.log_dir).expanduser() if settings.log_dir else None, settings.debug)

    app = FastAPI(
        title=f"{settings.app_name} API",
        version=settings.app_version,
        description="Personal DSA study tracker: questions, revision and platform stats",
        lifespan=lifespan,
    )

    # ==================== Shared Resources ====================

    engine = create_engine(settings.database_url, echo=settings.debug)

    # Store in app state for dependency injection
    app.state.settings = settings
    app.state.engine = engine
    app.state.async_session_factory = create_session_factory(engine)
    app.state.email_service = email_service or EmailService(settings)
    app.state.platform_client = platform_client or PlatformClient(settings)

    # ==================== CORS Configuration ====================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==================== Exception Handlers ====================

    @app.exception_handler(DsaTrackerException)
    async def dsa_tracker_exception_handler(request: Request, exc: DsaTrackerException) -> JSONResponse:
        """Handle all DSA Tracker business exceptions

        All custom exceptions (ValidationError, ConflictError, etc.) inherit
        from DsaTrackerException and carry their own HTTP status.
        """
        error = {"code": exc.code}
        if exc.details is not None:
            error["details"] = exc.details

        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.debug(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=exc.message, error=error).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle Pydantic validation errors

        This catches errors from FastAPI's automatic request validation
        (e.g., invalid email format, missing required fields, type mismatches).
        """
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                message="Validation failed",
                error={
                    "code": "VALIDATION_ERROR",
                    "details": jsonable_encoder(exc.errors())
                }
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Last resort: log the traceback, reveal nothing to the client"""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                message="Internal server error",
                error={"code": "INTERNAL_ERROR"}
            ).model_dump(),
        )

    # ==================== Router Registration ====================

    app.include_router(auth_router)
    app.include_router(question_router)
    app.include_router(user_router)
    app.include_router(leetcode_router)
    app.include_router(codeforces_router)

    @app.get("/health", response_model=SuccessResponse[dict], tags=["Health"])
    async def health_check():
        """Liveness probe"""
        return SuccessResponse(data={"status": "ok", "version": settings.app_version})

    return app
