# =============================================
# File: tests/test_logging.py
# Purpose: Log events carry the serving pod and version
# =============================================
from __future__ import annotations

import structlog

from app.config import Settings
from app.core.logging import InstanceContext, setup_logging


def test_instance_context_adds_pod_and_version():
    processor = InstanceContext("pod-9", "4.5.6")
    event = processor(None, "info", {"event": "http.request"})
    assert event == {"event": "http.request", "pod_name": "pod-9", "app_version": "4.5.6"}


def test_instance_context_keeps_explicit_values():
    processor = InstanceContext("pod-9", "4.5.6")
    event = processor(None, "info", {"event": "x", "pod_name": "other"})
    assert event["pod_name"] == "other"


def test_setup_logging_installs_instance_context():
    setup_logging(Settings(_env_file=None, POD_NAME="pod-b", APP_VERSION="9.9.9", LOG_LEVEL="debug"))
    processors = structlog.get_config()["processors"]
    contexts = [p for p in processors if isinstance(p, InstanceContext)]
    assert len(contexts) == 1
    assert contexts[0].pod_name == "pod-b"
    assert contexts[0].version == "9.9.9"
