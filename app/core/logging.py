import logging
from collections.abc import MutableMapping
from typing import Any

import structlog

from app.config import Settings, get_settings


class InstanceContext:
    """Stamps every event with the pod and version serving it."""

    def __init__(self, pod_name: str, version: str) -> None:
        self.pod_name = pod_name
        self.version = version

    def __call__(self, _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        event_dict.setdefault("pod_name", self.pod_name)
        event_dict.setdefault("app_version", self.version)
        return event_dict


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(message)s",
    )
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            InstanceContext(settings.POD_NAME, settings.APP_VERSION),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
