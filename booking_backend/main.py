import asyncio
import logging
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from booking_backend.api.routes import bookings, slots, staff, statistics, tools
from booking_backend.core.config import _ENV_FILE, settings
from booking_backend.core.db import async_session_maker, init_db
from booking_backend.core.errors import BookingAppError, ServerError, error_body
from booking_backend.core.logging_context import configure_logging, set_request_id
from booking_backend.services.booking_service import complete_finished_bookings

configure_logging(settings)
logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


async def _run_booking_completion() -> None:
    """Move confirmed bookings that have already ended to completed."""
    try:
        async with async_session_maker() as session:
            try:
                n = await complete_finished_bookings(session)
                await session.commit()
                if n:
                    logger.info("Booking completion: %d booking(s) marked completed", n)
            except Exception:
                await session.rollback()
                raise
    except Exception as e:
        logger.exception("Booking completion failed: %s", e)


async def _completion_loop() -> None:
    while True:
        await _run_booking_completion()
        await asyncio.sleep(settings.booking_completion_interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Loading .env from: %s (exists: %s)", _ENV_FILE, _ENV_FILE.exists())
    if not settings.api_key:
        logger.warning("API_KEY is not set; every authenticated request will be rejected")
    if settings.create_tables_on_startup:
        await init_db()
    task = None
    if settings.booking_completion_enabled:
        task = asyncio.create_task(_completion_loop())
    yield
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


app = FastAPI(
    title="Booking Backend API",
    description="Bookings, available slots, statistics and tool interface for businesses",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key", "X-Request-ID"],
)

app.include_router(bookings.router, prefix=settings.api_prefix)
app.include_router(slots.router, prefix=settings.api_prefix)
app.include_router(statistics.router, prefix=settings.api_prefix)
app.include_router(staff.router, prefix=settings.api_prefix)
app.include_router(tools.router, prefix=settings.api_prefix)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid4().hex
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _cors_headers(origin: str | None) -> dict[str, str]:
    """Add CORS headers to error responses so the browser doesn't block them."""
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, X-API-Key, X-Request-ID",
    }
    if origin and origin in settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = origin
    elif settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = settings.cors_origins_list[0]
    return headers


def _error_response(request: Request, status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=_cors_headers(request.headers.get("origin")),
    )


@app.exception_handler(BookingAppError)
async def booking_error_handler(request: Request, exc: BookingAppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(request, exc.status_code, exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        request,
        400,
        error_body("BAD_REQUEST", "Invalid request parameters", jsonable_encoder(exc.errors())),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_ERROR_CODES.get(exc.status_code, "SERVER_ERROR" if exc.status_code >= 500 else "ERROR")
    return _error_response(request, exc.status_code, error_body(code, str(exc.detail)))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failures (database errors included) become a generic 500."""
    logger.exception("Unhandled exception: %s", exc)
    return _error_response(request, 500, ServerError("Internal server error").to_dict())


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
