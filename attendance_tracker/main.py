from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from attendance_tracker.config import Settings, settings as default_settings
from attendance_tracker.cors import CORS_HEADERS, CORS_METHODS, is_origin_allowed
from attendance_tracker.database import AttendanceStore
from attendance_tracker.exceptions import (
    REQUIRED_FIELDS_MESSAGE,
    AttendanceAPIError,
    RecordValidationError,
    StartupFailed,
)
from attendance_tracker.routers import attendance_router, health_router, info_router
from attendance_tracker.startup import StartupSupervisor
from attendance_tracker.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


# Lifecycle Manager
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    store = AttendanceStore(settings)
    supervisor = StartupSupervisor(
        store.bootstrap,
        max_attempts=settings.DB_CONNECT_ATTEMPTS,
        retry_delay=settings.DB_RETRY_DELAY_SECONDS,
        target=settings.safe_database_target,
    )
    try:
        await supervisor.run()
    except StartupFailed:
        await store.dispose()
        raise

    app.state.store = store
    logger.info("Server running on port %s", settings.PORT)
    logger.info("Database: %s", settings.safe_database_target)
    logger.info("Health check: http://localhost:%s/health", settings.PORT)

    yield

    # uvicorn has stopped accepting requests and drained in-flight ones by now.
    logger.info("Shutting down gracefully...")
    app.state.store = None
    await store.dispose()


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": error, **extra}
    )


async def handle_api_error(request: Request, exc: AttendanceAPIError):
    extra = {"details": exc.details} if exc.details is not None else {}
    return _error(exc.status_code, exc.message, **extra)


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "missing":
        message = REQUIRED_FIELDS_MESSAGE
    elif first.get("type") == "json_invalid":
        message = "Request body must be valid JSON"
    else:
        message = first.get("msg", REQUIRED_FIELDS_MESSAGE)
    return await handle_api_error(request, RecordValidationError(message))


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    ):
        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        return _error(status.HTTP_404_NOT_FOUND, f"Route {url} not found")
    return _error(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error("Global error handler: %r", exc, exc_info=exc)
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        message=str(exc),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = None

    # Innermost: unexpected errors become the 500 envelope here, so the
    # CORS headers are still added on the way out.
    @app.middleware("http")
    async def catch_unexpected_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unexpected_error(request, exc)

    allowed_origins = settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    # Registered after CORSMiddleware so it wraps it and runs first.
    @app.middleware("http")
    async def reject_unknown_origins(request: Request, call_next):
        origin = request.headers.get("origin")
        if not is_origin_allowed(origin, allowed_origins):
            logger.warning("Blocked by CORS: %s", origin)
            return _error(status.HTTP_403_FORBIDDEN, "Not allowed by CORS")
        return await call_next(request)

    app.add_exception_handler(AttendanceAPIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # --- Register Routers ---
    app.include_router(health_router)
    app.include_router(info_router)
    app.include_router(attendance_router)

    return app


app = create_app()


def start():
    import uvicorn

    uvicorn.run(
        "attendance_tracker.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        lifespan="on",
    )
