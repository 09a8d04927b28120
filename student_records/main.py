"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from student_records.api.v1.router import api_router
from student_records.core.config import Settings, get_settings
from student_records.core.database import Database
from student_records.core.exceptions import AppException
from student_records.middleware.logging import RequestLoggingMiddleware
from student_records.utils.validators import SNAKE_TO_CAMEL

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress noisy SQLAlchemy logs
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def _error_body(message: str, errors: list[dict] | None = None) -> dict:
    body: dict = {"success": False, "error": message}
    if errors:
        body["errors"] = errors
    return body


def _request_field(loc: tuple) -> str:
    # ("query", "minGpa") -> "minGpa"; ("body",) -> "body"
    field = str(loc[-1]) if loc else "body"
    return SNAKE_TO_CAMEL.get(field, field)


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": _request_field(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.warning(f"{request.method} {request.url.path}: request validation failed")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation failed", errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "Resource not found"
        else:
            message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        message = "An unexpected error occurred" if settings.is_production else str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(message),
        )


def create_application(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the database for the lifetime of the application."""
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        database.open()
        if settings.CREATE_TABLES_ON_STARTUP:
            database.create_tables()
        yield
        logger.info("Shutting down application")
        database.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
Student Records API - manage student records and view roster statistics.

## Features

- **Students**: create, list, filter, update and delete student records
- **Statistics**: GPA bands, graduation years and top locations
- **Export**: download the roster as JSON, CSV or Excel

## Error Handling

All errors follow a standard format:
```json
{
  "success": false,
  "error": "Validation failed",
  "errors": [{"field": "gpa", "message": "GPA must be between 0.0 and 4.0"}]
}
```
        """,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app, settings)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness probe."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return app


# Create app instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "student_records.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().DEBUG,
    )
