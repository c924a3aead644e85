"""FastAPI application for the HRPulse psychometrics service.

Wires the psychometric routers, the request middleware stack, error
rendering and the startup and shutdown events into a single application.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from hrpulse.api.middleware.error_handler import ErrorHandlerMiddleware
from hrpulse.api.middleware.logging_middleware import LoggingMiddleware
from hrpulse.api.middleware.request_id import RequestIDMiddleware, get_request_id
from hrpulse.core.config import get_settings
from hrpulse.core.events import create_start_app_handler, create_stop_app_handler
from hrpulse.schemas.base import error_envelope
from hrpulse.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the startup tasks before serving and the shutdown tasks after."""
    logger.info(
        f"Starting {settings.APP_NAME} {settings.APP_VERSION}",
        extra={
            "environment": settings.APP_ENV,
            "cache": settings.ENABLE_CACHE,
            "metrics": settings.ENABLE_METRICS,
            "rules_path": settings.RECOMMENDATION_RULES_PATH,
        },
    )
    await create_start_app_handler(app)()

    yield

    await create_stop_app_handler(app)()
    logger.info(f"{settings.APP_NAME} stopped")


def api_routers() -> List[Tuple[APIRouter, str, str]]:
    """Routers served under the API prefix, with their sub-prefix and tag."""
    from hrpulse.routers import attempts, dashboard, health, questions, tests

    return [
        (health.router, "", "Health"),
        (tests.router, "/psychometric-tests", "Psychometric Tests"),
        (questions.router, "/psychometric-questions", "Psychometric Questions"),
        (attempts.router, "/psychometric-test-attempts", "Psychometric Test Attempts"),
        (dashboard.router, "", "Dashboard"),
    ]


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    docs_prefix = settings.API_V1_PREFIX if settings.ENABLE_API_DOCS else None
    app = FastAPI(
        title=settings.APP_NAME,
        description="Psychometric test scoring and recommendation service for HR onboarding",
        version=settings.APP_VERSION,
        docs_url=f"{docs_prefix}/docs" if docs_prefix else None,
        redoc_url=f"{docs_prefix}/redoc" if docs_prefix else None,
        openapi_url=f"{docs_prefix}/openapi.json" if docs_prefix else None,
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    register_middleware(app)

    for router, prefix, tag in api_routers():
        app.include_router(router, prefix=f"{settings.API_V1_PREFIX}{prefix}", tags=[tag])

    register_root_endpoints(app)

    if settings.ENABLE_METRICS:
        setup_metrics(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error in the ``{"error": {...}}`` envelope.

    Service errors arrive here as ``HTTPException`` raised by the routes.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}",
            extra={"status_code": exc.status_code},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(exc.status_code, exc.detail, request_id=get_request_id()),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        logger.warning(
            f"Rejected request body for {request.method} {request.url.path}",
            extra={"errors": errors},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_envelope(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                "Validation error",
                request_id=get_request_id(),
                details=errors,
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        message = "An internal error occurred" if settings.is_production() else str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_envelope(
                status.HTTP_500_INTERNAL_SERVER_ERROR, message, request_id=get_request_id()
            ),
        )


def register_middleware(app: FastAPI) -> None:
    """Register the middleware stack.

    The last middleware added is the outermost, so request ids are assigned
    before logging and error handling run.
    """
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.APP_DEBUG)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1024)

    if settings.is_production():
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)


def register_root_endpoints(app: FastAPI) -> None:
    """Service banner and an unprefixed health check for load balancers."""

    @app.get("/health", tags=["Health"], summary="Basic health check")
    async def root_health() -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
        }

    @app.get("/", tags=["Root"], summary="Service information")
    async def root() -> Dict[str, str]:
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": f"{settings.API_V1_PREFIX}/docs",
            "health": "/health",
        }


def setup_metrics(app: FastAPI) -> None:
    """Expose Prometheus request metrics at ``/metrics``."""
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[".*health.*", "/metrics"],
        inprogress_name="hrpulse_inprogress",
        inprogress_labels=True,
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    logger.info("Prometheus metrics enabled at /metrics")


app = create_application()


__all__ = ["app", "create_application"]
