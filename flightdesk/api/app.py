"""
FastAPI application for the booking engine.

Builds the app, mounts the routers and maps the error taxonomy onto HTTP:
domain errors carry their own status, storage errors go through
``translate_storage_error``, request validation failures become 400.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .. import __version__
from ..database.config import DatabaseConfig, initialize_database
from ..exceptions import FlightDeskError, format_validation_error, translate_storage_error
from ..utils.config import AppConfig, get_config
from .dependencies import ServiceContainer
from .routes import flights, planes, reports, tickets

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Translate engine, storage and validation errors into the response envelope."""

    @app.exception_handler(FlightDeskError)
    async def handle_domain_error(request: Request, exc: FlightDeskError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: SQLAlchemyError):
        translated = translate_storage_error(exc)
        logger.error(f"{request.method} {request.url.path} storage error: {exc}")
        return _error(translated.status_code, translated.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _error(400, format_validation_error(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, "An unexpected error occurred")


def create_app(db_config: Optional[DatabaseConfig] = None, config: Optional[AppConfig] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        db_config: Database configuration; the global one is initialized when omitted
        config: Application configuration; loaded from the environment when omitted

    Returns:
        Configured FastAPI instance
    """
    config = config or get_config()
    if db_config is None:
        db_config = initialize_database(database_url=config.database_url, lock_timeout=config.db_lock_timeout)

    app = FastAPI(
        title="flightdesk",
        version=__version__,
        debug=config.app_debug,
    )
    app.state.services = ServiceContainer.build(db_config, config.default_replacement_threshold)

    register_exception_handlers(app)

    app.include_router(flights.router)
    app.include_router(tickets.router)
    app.include_router(reports.router)
    app.include_router(planes.router)

    @app.get("/health")
    def health():
        return {"success": db_config.test_connection()}

    logger.info(f"API ready on {db_config.db_type} database")
    return app
