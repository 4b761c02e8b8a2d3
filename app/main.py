import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, get_settings
from app.core.exceptions import (
    AppError,
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logging import bind_request_id, configure_logging, get_logger
from app.routers import health, razorpay
from app.services.razorpay import RazorpayGateway

log = get_logger(__name__)

API_PREFIX = "/api/razorpay"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    settings.require_gateway_credentials()
    if not settings.api_key:
        log.error("startup", msg="API_KEY not configured; protected routes will answer SERVER_CONFIG_ERROR")
    if settings.sentry_dsn:
        import sentry_sdk
        sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.env, traces_sample_rate=0.1)
        log.info("startup", msg="Sentry enabled")
    # A gateway injected before startup (tests) is left to its owner
    owned = app.state.gateway is None
    if owned:
        app.state.gateway = RazorpayGateway.from_settings(settings)
    log.info(
        "startup",
        env=settings.env,
        razorpay_environment=settings.razorpay_environment,
        api_prefix=API_PREFIX,
    )
    try:
        yield
    finally:
        if owned:
            await app.state.gateway.aclose()
            app.state.gateway = None
            log.info("shutdown", msg="Razorpay client closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(debug=settings.debug)

    app = FastAPI(
        title="Razorpay Relay API",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = None

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_id_middleware(request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_request_id(request_id)
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        log.info(
            "request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            client_ip=request.client.host if request.client else None,
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # Routers
    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(razorpay.router, prefix=API_PREFIX, tags=["razorpay"])

    return app


app = create_app()
