from __future__ import annotations

import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class MetricsSnapshot:
    total_requests: int
    requests_per_endpoint: Mapping[str, int] = field(default_factory=dict)
    uptime_seconds: float = 0.0


class CounterStore:
    """Process-wide request counters.

    One lock guards both the total and the per-route mapping. A hit bumps the
    total first, then its route, inside the same critical section, so a
    snapshot never sees one without the other.
    """

    def __init__(
        self,
        start_time: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._start_time = start_time if start_time is not None else clock()
        self._total_requests = 0
        self._per_route: dict[str, int] = {}

    @property
    def start_time(self) -> float:
        return self._start_time

    def record_hit(self, route: str) -> None:
        with self._lock:
            self._total_requests += 1
            self._per_route[route] = self._per_route.get(route, 0) + 1

    def uptime_seconds(self) -> float:
        return max(self._clock() - self._start_time, 0.0)

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            total = self._total_requests
            per_route = dict(self._per_route)
        return MetricsSnapshot(
            total_requests=total,
            requests_per_endpoint=MappingProxyType(per_route),
            uptime_seconds=self.uptime_seconds(),
        )
