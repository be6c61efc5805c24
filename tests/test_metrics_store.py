# =============================================
# File: tests/test_metrics_store.py
# Purpose: Counter store concurrency, snapshot isolation and uptime
# =============================================
from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.core.metrics import CounterStore


def test_fresh_store_is_empty(store):
    snap = store.snapshot()
    assert snap.total_requests == 0
    assert dict(snap.requests_per_endpoint) == {}
    assert snap.uptime_seconds == 0.0


def test_record_hit_creates_route_lazily(store):
    store.record_hit("/info")
    store.record_hit("/info")
    store.record_hit("/healthz")

    snap = store.snapshot()
    assert snap.total_requests == 3
    assert dict(snap.requests_per_endpoint) == {"/info": 2, "/healthz": 1}


def test_concurrent_hits_are_not_lost():
    store = CounterStore()
    routes = ["/", "/healthz", "/version", "/info", "/metrics", "/static/"]
    calls = [random.choice(routes) for _ in range(5000)]

    with ThreadPoolExecutor(max_workers=32) as pool:
        list(pool.map(store.record_hit, calls))

    snap = store.snapshot()
    assert snap.total_requests == len(calls)
    for route in set(calls):
        assert snap.requests_per_endpoint[route] == calls.count(route)


def test_snapshot_total_matches_sum_without_writers(store):
    for route in ["/a", "/b", "/a", "/c", "/a"]:
        store.record_hit(route)

    snap = store.snapshot()
    assert snap.total_requests == sum(snap.requests_per_endpoint.values())


def test_snapshot_mapping_does_not_alias_store(store):
    store.record_hit("/info")
    snap = store.snapshot()

    copied = dict(snap.requests_per_endpoint)
    copied["/info"] = 999
    copied["/bogus"] = 1

    again = store.snapshot()
    assert dict(again.requests_per_endpoint) == {"/info": 1}


def test_snapshot_does_not_see_later_hits(store):
    store.record_hit("/info")
    snap = store.snapshot()
    store.record_hit("/info")

    assert snap.total_requests == 1
    assert snap.requests_per_endpoint["/info"] == 1


def test_snapshot_is_frozen(store):
    snap = store.snapshot()
    with pytest.raises(AttributeError):
        snap.total_requests = 10


def test_uptime_follows_clock(store, clock):
    clock.advance(42.5)
    assert store.uptime_seconds() == 42.5
    assert store.snapshot().uptime_seconds == 42.5


def test_start_time_is_fixed(store, clock):
    started = store.start_time
    clock.advance(10)
    store.record_hit("/")
    assert store.start_time == started


def test_explicit_start_time(clock):
    store = CounterStore(start_time=clock.now - 90000, clock=clock)
    assert store.uptime_seconds() == 90000


def test_snapshot_mapping_is_read_only(store):
    store.record_hit("/info")
    snap = store.snapshot()

    with pytest.raises(TypeError):
        snap.requests_per_endpoint["/info"] = 999
    with pytest.raises(TypeError):
        del snap.requests_per_endpoint["/info"]

    assert store.snapshot().requests_per_endpoint == {"/info": 1}
