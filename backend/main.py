from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from sqlalchemy.exc import OperationalError as SAOperationalError

from api.router import api_router
from core.bootstrap import ensure_schema
from core.config import settings
from core.database import DatabaseUnavailableError, is_transient_db_connectivity_error, ping_database
from core.logging import setup_logging
from services.school_store import MemorySchoolStore


logger = logging.getLogger(__name__)

# Local frontend dev servers on any port.
_LOCAL_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DatabaseUnavailableError)
    def _db_unavailable(_request, exc: DatabaseUnavailableError):
        logger.warning("Database unavailable (503)", exc_info=exc)
        return _error(503, "DATABASE_UNAVAILABLE", "Database temporarily unavailable. Please retry.")

    @app.exception_handler(SAOperationalError)
    def _db_operational(_request, exc: SAOperationalError):
        if is_transient_db_connectivity_error(exc):
            logger.warning("Transient database connectivity error (503)", exc_info=exc)
            return _error(503, "DATABASE_UNAVAILABLE", "Database temporarily unavailable. Please retry.")
        logger.error("Database operation failed", exc_info=exc)
        return _error(500, "DATABASE_ERROR", "Database operation failed.")


def _add_cors(app: FastAPI, *, is_production: bool) -> None:
    origins = [settings.frontend_origin]
    if not is_production:
        origins += ["http://localhost:5173", "http://127.0.0.1:5173"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=None if is_production else _LOCAL_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app() -> FastAPI:
    setup_logging(environment=settings.environment, level_override=settings.log_level)
    is_production = settings.environment == "production"
    app = FastAPI(
        title="School Timetable API",
        version="0.1.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )

    # Anonymous callers work against this; identified owners go to the database.
    app.state.memory_store = MemorySchoolStore()
    try:
        ensure_schema()
    except SAOperationalError as exc:
        logger.warning("Store schema not created; owner-scoped requests will fail until the database is back", exc_info=exc)

    _register_error_handlers(app)
    _add_cors(app, is_production=is_production)

    @app.get("/health")
    def health() -> dict:
        return {"app": "ok", "database": "ok" if ping_database() else "down"}

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
