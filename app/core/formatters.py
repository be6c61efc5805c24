from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError, select_autoescape

from app.core.exceptions import RenderError
from app.core.metrics import MetricsSnapshot


@dataclass(frozen=True)
class AppMetadata:
    app_name: str
    version: str
    pod_name: str


def format_uptime(seconds: float) -> str:
    total = max(int(math.floor(seconds)), 0)
    days = total // 86400
    hours = (total // 3600) % 24
    minutes = (total // 60) % 60
    secs = total % 60

    if days > 0:
        return f"{days}d {hours}h {minutes}m {secs}s"
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_timestamp(now: datetime) -> str:
    return now.isoformat(timespec="seconds")


def build_info(snapshot: MetricsSnapshot, metadata: AppMetadata, now: datetime) -> dict[str, Any]:
    return {
        "app_name": metadata.app_name,
        "version": metadata.version,
        "pod_name": metadata.pod_name,
        "timestamp": format_timestamp(now),
        "uptime_seconds": max(int(math.floor(snapshot.uptime_seconds)), 0),
        "uptime_formatted": format_uptime(snapshot.uptime_seconds),
        "total_requests": snapshot.total_requests,
        "requests_per_endpoint": dict(snapshot.requests_per_endpoint),
    }


def build_page_context(snapshot: MetricsSnapshot, metadata: AppMetadata, now: datetime) -> dict[str, Any]:
    context = build_info(snapshot, metadata, now)
    context["requests_per_endpoint"] = dict(sorted(snapshot.requests_per_endpoint.items()))
    return context


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def render_prometheus(snapshot: MetricsSnapshot) -> str:
    lines = [
        "# HELP http_requests_total Total number of HTTP requests",
        "# TYPE http_requests_total counter",
        f"http_requests_total {snapshot.total_requests}",
        "",
        "# HELP http_requests_per_endpoint_total Total number of HTTP requests per endpoint",
        "# TYPE http_requests_per_endpoint_total counter",
    ]
    for endpoint, count in sorted(snapshot.requests_per_endpoint.items()):
        lines.append(f'http_requests_per_endpoint_total{{endpoint="{_escape_label_value(endpoint)}"}} {count}')
    lines.extend(
        [
            "",
            "# HELP uptime_seconds Application uptime in seconds",
            "# TYPE uptime_seconds gauge",
            f"uptime_seconds {snapshot.uptime_seconds:.2f}",
        ]
    )
    return "\n".join(lines) + "\n"


class HtmlRenderer:
    """Renders the index page from a Jinja2 template on disk.

    The template is read on every render so a broken or missing file shows up
    as a ``RenderError`` on the request that hits it.
    """

    def __init__(self, template_path: str | Path) -> None:
        self.template_path = Path(template_path)
        self.env = Environment(
            autoescape=select_autoescape(default=True, default_for_string=True),
            undefined=StrictUndefined,
        )

    def render(self, context: dict[str, Any]) -> str:
        try:
            source = self.template_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RenderError("Error reading template") from exc

        try:
            template = self.env.from_string(source)
        except TemplateError as exc:
            raise RenderError("Error parsing template") from exc

        try:
            return template.render(**context)
        except TemplateError as exc:
            raise RenderError("Error executing template") from exc
