"""FastAPI application factory and configuration."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from edqorta.api.routes import (
    conversations_router,
    health_router,
    notifications_router,
    properties_router,
    tours_router,
    users_router,
)
from edqorta.core.config import settings
from edqorta.core.exceptions import AppException
from edqorta.core.logging import configure_logging
from edqorta.services.engine import WorkflowEngine
from edqorta.storage.base import StorageBackend
from edqorta.storage.memory import InMemoryStorage

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

SERVICE_NAME = "edQorta Workflow API"
VERSION = "0.1.0"

# Error code -> HTTP status; unknown codes fall back to 400
ERROR_STATUS_CODES: dict[str, int] = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_STATE": status.HTTP_409_CONFLICT,
    "ALREADY_PENDING": status.HTTP_409_CONFLICT,
    "OUT_OF_RANGE": 422,
    "MISSING_EVIDENCE": 422,
    "VALIDATION_ERROR": 422,
}


def error_response(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": code, "message": message, "details": details or {}},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Seed the in-memory store on startup in development."""
    engine: WorkflowEngine = app.state.engine
    logger.info(
        "Starting service",
        service=SERVICE_NAME,
        environment=settings.app_env,
        storage=type(engine.storage).__name__,
    )

    if (
        settings.is_development
        and settings.seed_demo_data
        and isinstance(engine.storage, InMemoryStorage)
    ):
        prop = await engine.storage.seed_demo_data()
        logger.info("Seeded demo data", property_id=prop.id)

    yield

    logger.info("Shutting down service", service=SERVICE_NAME)


def create_app(storage: StorageBackend | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        storage: Store for this process; a fresh in-memory store by default
    """
    app = FastAPI(
        title=SERVICE_NAME,
        description="Conversations, deals, tours and geofenced verification for property listings",
        version=VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.engine = WorkflowEngine.build(storage or InMemoryStorage())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Map workflow errors onto HTTP statuses."""
        logger.warning(
            "Request rejected",
            code=exc.code,
            message=exc.message,
            details=exc.details,
            path=request.url.path,
        )
        return error_response(
            ERROR_STATUS_CODES.get(exc.code, status.HTTP_400_BAD_REQUEST),
            exc.code,
            exc.message,
            exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Give malformed request bodies the same shape as workflow errors."""
        return error_response(
            422,
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception", error=str(exc), path=request.url.path, exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "An unexpected error occurred",
        )

    for router in (
        health_router,
        users_router,
        properties_router,
        conversations_router,
        tours_router,
        notifications_router,
    ):
        app.include_router(router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"service": SERVICE_NAME, "version": VERSION, "status": "running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "edqorta.api.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.is_development,
    )
