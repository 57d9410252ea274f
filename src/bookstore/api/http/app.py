"""FastAPI application factory and setup."""

import re
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import IntegrityError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.bookstore.api.http.app_data import AppServices
from src.bookstore.api.http.middleware.limiter import close_rate_limiter
from src.bookstore.api.http.routers import auth, health
from src.bookstore.api.http.routers.admin import customers as admin_customers
from src.bookstore.api.http.routers.admin import dashboard as admin_dashboard
from src.bookstore.api.http.routers.admin import orders as admin_orders
from src.bookstore.api.http.routers.admin import reviews as admin_reviews
from src.bookstore.api.http.routers.catalog import (
    authors,
    book_copies,
    books,
    categories,
    combos,
    publishers,
)
from src.bookstore.api.http.routers.shop import (
    addresses,
    cart,
    orders,
    payments,
    recommendations,
    reviews,
    wishlist,
)
from src.bookstore.api.utils.app_startup import configure_logging
from src.bookstore.core.services.database.db_manage import DbManageService
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.core.services.jwt import JwtGeneratorService, JwtVerificationService
from src.bookstore.runtime.config.config_data import DEFAULT_JWT_SECRET
from src.bookstore.runtime.context import get_config

configure_logging()

_DUPLICATE_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),
    re.compile(r"Key \((\w+)\)=\(.*\) already exists"),
)


def duplicate_field(error: IntegrityError) -> str | None:
    """Name of the column behind a unique violation, when the driver reports it."""
    message = str(error.orig)
    for pattern in _DUPLICATE_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


def integrity_detail(error: IntegrityError) -> str:
    """Client message for a constraint the database enforced."""
    field = duplicate_field(error)
    if field:
        return f"{field} already exists"
    if "unique" in str(error.orig).lower():
        return "Duplicate value"
    return "Invalid data"


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Bookstore API",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

__all__ = ["app", "startup", "shutdown"]

# --- CORS configuration ---
if get_config().app.environment == "production" and "*" in get_config().app.cors.origins:
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Request logging middleware ---
def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _failure(request_id: str, status_code: int, detail, headers: dict | None = None):
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": request_id},
        headers={"X-Request-ID": request_id, **(headers or {})},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    started = time.perf_counter()

    def finished(status_code: int, **extra):
        elapsed = round((time.perf_counter() - started) * 1000, 1)
        return logger.bind(status_code=status_code, duration_ms=elapsed, **extra)

    with logger.contextualize(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        client_ip=_client_ip(request),
    ):
        logger.debug("request.start")
        try:
            response = await call_next(request)
        except HTTPException as exc:
            finished(exc.status_code, error_type=type(exc).__name__).warning("request.error")
            return _failure(request_id, exc.status_code, exc.detail, exc.headers)
        except RequestValidationError as exc:
            finished(422).warning("request.validation_error")
            return _failure(request_id, 422, exc.errors())
        except Exception as exc:
            finished(500, error_type=type(exc).__name__).exception("request.error")
            return _failure(request_id, 500, "Internal Server Error")

        finished(response.status_code).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    detail = integrity_detail(exc)
    logger.bind(error_type=type(exc).__name__, detail=detail).warning("Integrity violation")
    return JSONResponse(status_code=400, content={"detail": detail})


# --- Router registration ---
api_router = APIRouter(prefix="/api")
for module in (
    auth,
    books,
    categories,
    authors,
    publishers,
    combos,
    cart,
    orders,
    payments,
    reviews,
    wishlist,
    addresses,
    recommendations,
    book_copies,
    admin_orders,
    admin_reviews,
    admin_customers,
    admin_dashboard,
):
    api_router.include_router(module.router)
api_router.include_router(books.admin_router)
api_router.include_router(combos.admin_router)

app.include_router(health.router)
app.include_router(api_router)


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    if config.app.environment == "production" and config.jwt.secret == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT secret must be configured in production")
    logger.info("Starting bookstore API ({})", config.app.environment)

    services = AppServices(
        database=DbSessionService(),
        token_issuer=JwtGeneratorService(),
        token_verifier=JwtVerificationService(),
    )
    if config.database.auto_create:
        DbManageService(services.database.engine).create_all()
    app.state.services = services


async def shutdown() -> None:
    logger.info("Shutting down bookstore API")
    await close_rate_limiter()
    services: AppServices | None = getattr(app.state, "services", None)
    if services is not None:
        services.close()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,
    )
