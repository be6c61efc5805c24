from __future__ import annotations


class AppError(Exception):
    def __init__(self, message: str, status_code: int = 500, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404, code="NOT_FOUND")


class RenderError(AppError):
    """The HTML page template could not be read, parsed or executed."""

    def __init__(self, message: str = "Error rendering page"):
        super().__init__(message, status_code=500, code="RENDER_ERROR")
