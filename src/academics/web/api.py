"""FastAPI application factory.

Main entry point for the Academic Records Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from academics import __version__
from academics.config.app_config import load_app_config
from academics.db.database import get_db_path, init_db
from academics.services.records_service import RecordsService
from academics.web.routes import (
    grades_router,
    health_router,
    modules_router,
    students_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    db_path = get_db_path()
    init_db(db_path)
    logger.info("api_startup", db_path=str(db_path.absolute()))
    yield
    # Shutdown (nothing to do for now)


def _describe_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparsable or missing request input as 400 with a detail string."""
    detail = _describe_errors(exc)
    logger.info("api.validation_failed", path=request.url.path, detail=detail)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail},
    )


def create_app(service: RecordsService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        service: RecordsService to serve; a default one is built if omitted

    Returns:
        Configured FastAPI app instance
    """
    config = load_app_config()

    app = FastAPI(
        title=config.api.title,
        description="Students, modules, registrations and grades",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.records_service = service or RecordsService()

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # CORS middleware for the browser front end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=config.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(students_router)
    app.include_router(modules_router)
    app.include_router(grades_router)

    return app
