from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.metrics import CounterStore
from app.main import create_app


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CounterStore:
    return CounterStore(clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        APP_NAME="Tiny Test App",
        APP_VERSION="2.3.4",
        POD_NAME="pod-a",
        ENVIRONMENT="test",
    )


@pytest.fixture
def client(test_settings: Settings, store: CounterStore):
    app = create_app(settings=test_settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
