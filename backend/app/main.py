"""Expose the portfolio FastAPI app and enforce local development CORS defaults."""

import logging
import os
import re
import time
from contextlib import asynccontextmanager
from typing import Any, Iterable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import is_development, read_bool_env, read_int_env
from .database import session_scope
from .migrations import run_database_migrations
from .routers import (
    auth_router,
    messages_router,
    projects_router,
    skills_router,
    users_router,
)
from .services import BackendUnavailable, ListingError, UserService

LOGGER = logging.getLogger(__name__)

API_PREFIX = "/api"
STARTUP_MIGRATIONS_ENV = "ENABLE_STARTUP_MIGRATIONS"
RATE_LIMIT_ENABLED_ENV = "RATE_LIMIT_ENABLED"
RATE_LIMIT_REQUESTS_ENV = "RATE_LIMIT_REQUESTS"
RATE_LIMIT_WINDOW_ENV = "RATE_LIMIT_WINDOW_MINUTES"
RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

LOCAL_DEVELOPMENT_ORIGINS = {
    "http://localhost:5174",
    "http://localhost:5173",
}
LOCALHOST_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$"

DEFAULT_ALLOWED_ORIGINS = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    *LOCAL_DEVELOPMENT_ORIGINS,
    "http://127.0.0.1:5174",
    "http://localhost:4173",
    "http://127.0.0.1:4173",
}


def _normalize_origin(origin: str) -> str | None:
    stripped = origin.strip()
    if not stripped:
        return None
    return stripped.rstrip("/")


def _read_allowed_origins(raw_origins: Iterable[str]) -> list[str]:
    normalized = {_normalize_origin(origin) for origin in raw_origins}
    return sorted({origin for origin in normalized if origin})


def _split_raw_origins(raw_value: str) -> list[str]:
    """Split a raw origin string using commas or whitespace as separators."""

    return [origin for origin in re.split(r"[\s,]+", raw_value) if origin]


def _load_allowed_origins_from_env() -> list[str]:
    raw_values = [os.getenv("FRONTEND_URL", ""), os.getenv("BACKEND_ALLOWED_ORIGINS", "")]
    origins: list[str] = []
    for raw_value in raw_values:
        origins.extend(_split_raw_origins(raw_value))
    return _read_allowed_origins(origins)


def _resolve_allowed_origins() -> list[str]:
    env_origins = _load_allowed_origins_from_env()
    if env_origins:
        origins = list(env_origins)
    else:
        origins = _read_allowed_origins(DEFAULT_ALLOWED_ORIGINS)

    missing_dev_origins = [
        origin for origin in LOCAL_DEVELOPMENT_ORIGINS if origin not in origins
    ]
    if missing_dev_origins:
        # The Vite dev server origins stay allowed even when the environment omits them.
        origins = _read_allowed_origins([*origins, *missing_dev_origins])

    return origins


def _rate_limit_rule() -> str:
    requests = read_int_env(RATE_LIMIT_REQUESTS_ENV, 100)
    minutes = read_int_env(RATE_LIMIT_WINDOW_ENV, 15)
    if requests < 1 or minutes < 1:
        raise ValueError(f"{RATE_LIMIT_REQUESTS_ENV} and {RATE_LIMIT_WINDOW_ENV} must be positive")
    return f"{requests} per {minutes} minutes"


def build_limiter() -> Limiter:
    """Per-client request budget shared by every route under ``/api``."""

    return Limiter(
        key_func=get_remote_address,
        application_limits=[_rate_limit_rule()],
        enabled=read_bool_env(RATE_LIMIT_ENABLED_ENV, True),
    )


def ensure_database_is_ready() -> None:
    """Apply pending database migrations when the service starts."""

    if not read_bool_env(STARTUP_MIGRATIONS_ENV, True):
        LOGGER.info("Startup migrations disabled via %s", STARTUP_MIGRATIONS_ENV)
        return
    LOGGER.info("Ensuring database schema is up to date before serving requests")
    run_database_migrations()


def ensure_admin_account() -> None:
    """Seed the administrator account from ``ADMIN_EMAIL``/``ADMIN_PASSWORD``."""

    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        LOGGER.debug("ADMIN_EMAIL/ADMIN_PASSWORD not set; skipping admin seeding")
        return
    with session_scope() as session:
        UserService.ensure_admin_account(session, email, password)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_database_is_ready()
    ensure_admin_account()
    yield


limiter = build_limiter()

app = FastAPI(title="Portfolio API", lifespan=lifespan)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_allowed_origins(),
    allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    LOGGER.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


@app.middleware("http")
async def apply_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def _error_payload(message: str, exc: Optional[Exception] = None, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message, **extra}
    if exc is not None and is_development():
        payload["error"] = repr(exc)
    return payload


@app.exception_handler(ListingError)
async def handle_listing_error(_: Request, exc: ListingError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_payload(str(exc)))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or "request",
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_payload("Validation failed", errors=errors),
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


# Plain function: the rate limit middleware calls it without awaiting.
@app.exception_handler(RateLimitExceeded)
def handle_rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    LOGGER.warning("Rate limit exceeded for %s on %s", get_remote_address(request), request.url.path)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=_error_payload(RATE_LIMIT_MESSAGE),
    )


@app.exception_handler(BackendUnavailable)
async def handle_backend_unavailable(_: Request, exc: BackendUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_payload("Server Error", exc),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled error while serving %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_payload("Server Error", exc),
    )


app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(projects_router, prefix=API_PREFIX)
app.include_router(messages_router, prefix=API_PREFIX)
app.include_router(skills_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)


@app.get(f"{API_PREFIX}/health", tags=["health"])
def health_check() -> dict[str, Any]:
    return {"success": True, "message": "Server is running", "environment": os.getenv("APP_ENV", "production")}


@app.get("/", tags=["health"])
@limiter.exempt
def read_root() -> dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}
