"""Fiber Project Tracker API - Main Application Module.

This module initializes the FastAPI application with configuration,
middleware, routing, and lifecycle management for tracking knitting and
crochet projects together with their yarn, needle and hook catalogs.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import request_id_var, setup_logging
from app.database import AsyncSessionLocal, close_db, create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifecycle events."""
    setup_logging(settings.log_level, settings.log_format, debug=settings.debug)
    logger.info("Starting %s (%s)", settings.app_name, settings.environment.value)

    # Development and tests create tables directly; other environments use alembic
    if settings.is_development or settings.is_testing:
        await create_tables()
    else:
        logger.info("Schema managed by migrations: run 'alembic upgrade head'")

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Track fiber-craft projects, the materials they use and what they cost",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    setup_middleware(app)
    setup_exception_handlers(app)
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


def _error_body(request: Request, message: str, error_code: str, details=None) -> dict:
    return {
        "success": False,
        "message": message,
        "error_code": error_code,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": getattr(request.state, "request_id", None),
    }


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Application exceptions carry a structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, message)

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, message, error_code, details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        body = _error_body(request, "Validation failed", "VALIDATION_ERROR", errors)
        body["errors"] = errors
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "Internal Server Error", "INTERNAL_ERROR"),
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    from app.domains.catalog.controller import hook_router, needle_router, yarn_router
    from app.domains.measurement.controller import conversion_router, gauge_router
    from app.domains.project.controller import router as project_router

    @app.get("/health")
    async def health_check():
        """Health check endpoint with a database ping."""
        db_status = "healthy"
        try:
            async with AsyncSessionLocal() as db:
                await db.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Database health check failed")
            db_status = "unhealthy"

        body = {
            "status": "healthy" if db_status == "healthy" else "unhealthy",
            "version": settings.version,
            "environment": settings.environment.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {"database": db_status},
        }
        if db_status != "healthy":
            return JSONResponse(status_code=503, content=body)
        return body

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": "Fiber-craft project tracker",
            "docs_url": "/docs" if not settings.is_production else None,
        }

    app.include_router(project_router)
    app.include_router(yarn_router)
    app.include_router(needle_router)
    app.include_router(hook_router)
    app.include_router(gauge_router)
    app.include_router(conversion_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
