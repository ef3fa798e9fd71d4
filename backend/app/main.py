"""
FastAPI application entry point.

Uses structured logging from leaderboard.logging module.
Serve ``backend.app.main:app`` with any ASGI server.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leaderboard import __version__
from leaderboard.config import Settings, get_settings
from leaderboard.db import db
from leaderboard.logging import RequestLoggingMiddleware, configure_logging
from leaderboard.logging import api_logger as logger
from leaderboard.repositories import ApplicationRepository

from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import applications as applications_router
from .routers import auth as auth_router
from .routers import boards as boards_router
from .routers import contestants as contestants_router


def validate_config_on_startup(settings: Settings) -> None:
    """Log configuration problems. Errors are fatal in production only."""
    config_errors, config_warnings = settings.validate_production_config()
    for warning in config_warnings:
        logger.warning("config_warning", message=warning)

    is_production = os.getenv("ENV", "development").lower() in ("production", "prod")
    for error in config_errors:
        log_method = logger.error if is_production else logger.warning
        log_method("config_error", message=error)
    if config_errors and is_production:
        raise RuntimeError("Invalid production configuration: " + "; ".join(config_errors))


def bootstrap_admin_application(settings: Settings) -> None:
    """Register the admin application named by the settings, if any."""
    if not settings.has_admin_credentials:
        return
    with db.session() as session:
        ApplicationRepository(session).ensure_admin(
            settings.admin_api_key, settings.admin_api_secret
        )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(level=settings.logging_level.upper())

    # API is accessible at /api/v1/*
    api_prefix = f"{settings.api_prefix}/v1"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app_startup", app_name=settings.app_name, version=__version__)
        validate_config_on_startup(settings)

        db.initialize(settings.database_url)
        if settings.auto_create_tables:
            db.create_all_tables()
        logger.info("database_initialized", auto_create_tables=settings.auto_create_tables)

        bootstrap_admin_application(settings)
        yield

        logger.info("app_shutdown")
        db.reset()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
        expose_headers=["Retry-After", "X-Request-ID"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    # Outermost, so the request id is bound while the request line is logged
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness check. Returns no infrastructure details."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """
        Readiness check: 200 when the database answers, 503 otherwise.
        """
        database = db.health_check()
        checks = {"database": database["healthy"]}
        if not database["healthy"]:
            logger.warning("readiness_check_failed", error=database["error"])
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )
        return {"status": "ready", "checks": checks}

    app.include_router(auth_router.router, prefix=api_prefix)
    app.include_router(applications_router.router, prefix=api_prefix)
    app.include_router(contestants_router.router, prefix=api_prefix)
    app.include_router(boards_router.router, prefix=api_prefix)

    return app


app = create_app()
