from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.diagnostics import STATIC_ROUTE, build_router
from app.config import Settings, get_settings
from app.core.exceptions import AppError, RenderError
from app.core.formatters import AppMetadata, HtmlRenderer
from app.core.instrumentation import InstrumentedApp
from app.core.logging import get_logger, setup_logging
from app.core.metrics import CounterStore
from app.middleware import RequestLoggingMiddleware
from app.schemas.api_responses import ErrorResponse

BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"
TEMPLATE_PATH = BASE_DIR / "templates" / "index.html"

logger = get_logger(__name__)


def _get_request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    return request.headers.get("X-Request-ID")


def _error_response(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(
        error={
            "code": code,
            "message": message,
            "request_id": _get_request_id(request),
        }
    )
    return JSONResponse(status_code=status_code, content=payload.model_dump())


def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, RenderError):
        cause = exc.__cause__
        logger.error(
            "render.failed",
            path=request.url.path,
            message=exc.message,
            cause=repr(cause) if cause is not None else None,
        )
    return _error_response(request, exc.status_code, exc.code, exc.message)


def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api.unhandled_exception", path=request.url.path)
    return _error_response(request, 500, "INTERNAL_ERROR", "Internal error")


def create_app(
    settings: Settings | None = None,
    store: CounterStore | None = None,
    renderer: HtmlRenderer | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    store = store or CounterStore()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        setup_logging(settings)
        logger.info(
            "app.startup",
            version=settings.APP_VERSION,
            pod_name=settings.POD_NAME,
            port=settings.PORT,
        )
        yield
        logger.info("app.shutdown")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Reports instance identity, health and request statistics",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
        openapi_url="/openapi.json" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    app.state.counter_store = store
    app.state.metadata = AppMetadata(
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        pod_name=settings.POD_NAME,
    )
    app.state.html_renderer = renderer or HtmlRenderer(TEMPLATE_PATH)

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Mounted before the router so the catch-all route does not shadow it.
    app.mount(
        "/static",
        InstrumentedApp(StaticFiles(directory=STATIC_DIR), store, STATIC_ROUTE),
        name="static",
    )
    app.include_router(build_router(store))

    return app


app = create_app()
