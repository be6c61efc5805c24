from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from starlette.types import ASGIApp, Receive, Scope, Send

from app.core.metrics import CounterStore


def track_route(store: CounterStore, route: str, handler: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap ``handler`` so every call is counted under ``route`` first.

    The hit is recorded before the handler runs, so failing requests are
    counted too. Arguments, return value and exceptions pass through as-is.
    ``functools.wraps`` keeps the signature visible to FastAPI.
    """
    if inspect.iscoroutinefunction(handler):

        @wraps(handler)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            store.record_hit(route)
            return await handler(*args, **kwargs)

        return async_wrapper

    @wraps(handler)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        store.record_hit(route)
        return handler(*args, **kwargs)

    return wrapper


class InstrumentedApp:
    """ASGI counterpart of ``track_route`` for mounted applications."""

    def __init__(self, app: ASGIApp, store: CounterStore, route: str) -> None:
        self.app = app
        self.store = store
        self.route = route

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            self.store.record_hit(self.route)
        await self.app(scope, receive, send)
