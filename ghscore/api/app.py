"""
FastAPI application factory for GH Score.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from ghscore import __version__
from ghscore.api.routes import (
    applications,
    auth,
    candidates,
    notifications,
    organizations,
    users,
    vacancies,
)
from ghscore.core.errors import GHScoreError
from ghscore.data.database import get_database_manager
from ghscore.utils.config import AppSettings, get_settings
from ghscore.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    try:
        get_database_manager().ensure_indexes()
    except PyMongoError as e:
        logger.error(f"Could not ensure indexes at startup: {e}")
    logger.info("GH Score API started")
    yield
    get_database_manager().close()


async def handle_domain_error(request: Request, exc: GHScoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "message": "Invalid request", "details": details},
    )


async def handle_store_failure(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} store failure: {exc}")
    return JSONResponse(
        status_code=503,
        content={"error": "store_unavailable", "message": "The service is temporarily unavailable"},
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Internal server error"},
    )


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the API application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GHScoreError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(PyMongoError, handle_store_failure)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(auth.router)
    app.include_router(vacancies.router)
    app.include_router(candidates.router)
    app.include_router(applications.router)
    app.include_router(notifications.router)
    app.include_router(organizations.router)
    app.include_router(users.router)

    @app.get("/health", tags=["health"])
    def health() -> dict:
        database_ok = get_database_manager().check_connection()
        return {
            "status": "ok" if database_ok else "degraded",
            "database": database_ok,
            "version": __version__,
        }

    return app
