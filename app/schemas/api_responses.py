from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    request_id: str | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


class VersionResponse(BaseModel):
    version: str


class InfoResponse(BaseModel):
    app_name: str
    version: str
    pod_name: str
    timestamp: str
    uptime_seconds: int
    uptime_formatted: str
    total_requests: int
    requests_per_endpoint: dict[str, int] = Field(default_factory=dict)
