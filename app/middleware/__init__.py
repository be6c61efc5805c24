from __future__ import annotations

from .request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
