from collections.abc import Callable
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from app.core.exceptions import NotFoundError
from app.core.formatters import AppMetadata, HtmlRenderer, build_info, build_page_context, render_prometheus
from app.core.instrumentation import track_route
from app.core.metrics import CounterStore
from app.schemas.api_responses import InfoResponse, VersionResponse

ROOT_ROUTE = "/"
STATIC_ROUTE = "/static/"
OTHER_METHODS = ["HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_counter_store(request: Request) -> CounterStore:
    return request.app.state.counter_store


def get_metadata(request: Request) -> AppMetadata:
    return request.app.state.metadata


def get_renderer(request: Request) -> HtmlRenderer:
    return request.app.state.html_renderer


def _now() -> datetime:
    return datetime.now().astimezone()


def index(
    store: CounterStore = Depends(get_counter_store),
    metadata: AppMetadata = Depends(get_metadata),
    renderer: HtmlRenderer = Depends(get_renderer),
) -> HTMLResponse:
    context = build_page_context(store.snapshot(), metadata, _now())
    return HTMLResponse(renderer.render(context))


def healthz() -> PlainTextResponse:
    return PlainTextResponse("ok", status_code=200)


def version(metadata: AppMetadata = Depends(get_metadata)) -> VersionResponse:
    return VersionResponse(version=metadata.version)


def info(
    store: CounterStore = Depends(get_counter_store),
    metadata: AppMetadata = Depends(get_metadata),
) -> InfoResponse:
    return InfoResponse(**build_info(store.snapshot(), metadata, _now()))


def metrics(store: CounterStore = Depends(get_counter_store)) -> PlainTextResponse:
    return PlainTextResponse(render_prometheus(store.snapshot()))


def not_found(full_path: str) -> None:
    # Unmatched paths belong to the root handler and are counted under "/".
    raise NotFoundError(f"Path /{full_path} not found")


def _add_instrumented_route(
    router: APIRouter,
    store: CounterStore,
    path: str,
    route_key: str,
    endpoint: Callable[..., Any],
    **kwargs: Any,
) -> None:
    # GET is documented; every other method reaches the same handler unlisted.
    router.add_api_route(path, track_route(store, route_key, endpoint), methods=["GET"], **kwargs)
    kwargs["include_in_schema"] = False
    router.add_api_route(path, track_route(store, route_key, endpoint), methods=OTHER_METHODS, **kwargs)


def build_router(store: CounterStore) -> APIRouter:
    """Register every diagnostics endpoint behind ``track_route``.

    Routes accept any method, so every request is counted. The catch-all
    goes last so the concrete routes win.
    """
    router = APIRouter(tags=["diagnostics"])

    _add_instrumented_route(
        router,
        store,
        ROOT_ROUTE,
        ROOT_ROUTE,
        index,
        response_class=HTMLResponse,
        summary="Status page",
        include_in_schema=False,
    )
    _add_instrumented_route(
        router,
        store,
        "/healthz",
        "/healthz",
        healthz,
        response_class=PlainTextResponse,
        summary="Liveness check",
    )
    _add_instrumented_route(
        router,
        store,
        "/version",
        "/version",
        version,
        response_model=VersionResponse,
        summary="Deployed version",
    )
    _add_instrumented_route(
        router,
        store,
        "/info",
        "/info",
        info,
        response_model=InfoResponse,
        summary="Instance identity and request statistics",
    )
    _add_instrumented_route(
        router,
        store,
        "/metrics",
        "/metrics",
        metrics,
        response_class=PlainTextResponse,
        summary="Prometheus exposition text",
    )
    _add_instrumented_route(
        router,
        store,
        "/{full_path:path}",
        ROOT_ROUTE,
        not_found,
        include_in_schema=False,
    )
    return router
