from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from convos.config.settings import ContractSettings
from convos.fastapi_app import create_fastapi_app
from convos.infrastructure.cache import InMemoryServerCache
from convos.infrastructure.persistence import InMemoryStore
from convos.setup.ioc.container import create_container

BASE_URI = "http://convos.test"


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start=datetime(2024, 5, 1, 12, 0, 0)):
        self.now = start

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


def caller(user_id) -> dict:
    """Headers identifying the caller."""
    return {"X-Authorization": str(user_id)}


@pytest.fixture()
def settings():
    return ContractSettings(base_uri=BASE_URI)


@pytest.fixture()
def store():
    return InMemoryStore(clock=StepClock())


@pytest.fixture()
def server_cache():
    return InMemoryServerCache()


@pytest.fixture()
def app(store, server_cache, settings):
    """Create and configure a new FastAPI app instance for each test."""
    return create_fastapi_app(create_container(store, server_cache, settings))


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client
