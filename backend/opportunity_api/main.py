"""
Opportunity Tracker - FastAPI application.
CORS, health check, error handling, database pool lifecycle.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from opportunity_api import __version__
from opportunity_api.api.routes import api_router
from opportunity_api.core.config import Settings, get_settings
from opportunity_api.core.database import DatabasePool
from opportunity_api.core.errors import ApiError, ErrorKind
from opportunity_api.services.opportunity_repository import (
    OpportunityRepository,
    get_opportunity_repository,
)
from opportunity_api.services.validation import validation_error_from_errors

# Send app logs (including request logs) to stdout
_log_handler = logging.StreamHandler(sys.stdout)
_log_handler.setLevel(logging.INFO)
_log_handler.setFormatter(logging.Formatter("%(levelname)s:     %(message)s"))
_app_logger = logging.getLogger("opportunity_api")
_app_logger.setLevel(logging.INFO)
if not _app_logger.handlers:
    _app_logger.addHandler(_log_handler)
_app_logger.propagate = True

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request (method + path + status)."""

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: owns the database pool."""
    settings: Settings = app.state.settings
    logger.info("Starting Opportunity Tracker API")
    logger.info("CORS_ORIGIN=%s", settings.cors_origin)
    if settings.ENVIRONMENT == "production":
        settings.validate_for_production()
    db = DatabasePool(settings)
    app.state.db = db
    if settings.DB_CREATE_SCHEMA:
        await db.create_schema()
    try:
        yield
    finally:
        await db.close()
        logger.info("Shutting down")


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.kind in (ErrorKind.STORE, ErrorKind.CONNECTION):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = validation_error_from_errors(exc.errors())
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Opportunity Tracker API",
        version=__version__,
        description="Opportunities with notes and next steps, backed by a relational database.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Error handling middleware
    @app.middleware("http")
    async def catch_exceptions(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error: %s", exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error", "kind": "internal"},
            )

    @app.get("/")
    def root():
        return {
            "message": "Opportunity Tracker API",
            "version": __version__,
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "opportunities": "/opportunities",
                "notes": "/notes",
                "steps": "/steps",
            },
        }

    @app.get("/health")
    async def health(repo: OpportunityRepository = Depends(get_opportunity_repository)):
        try:
            await repo.ping()
        except ApiError as e:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"ok": False, "error": e.message},
            )
        return {"ok": True}

    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("opportunity_api.main:app", host="0.0.0.0", port=get_settings().PORT)


if __name__ == "__main__":
    run()
