"""Shared fixtures: a throwaway data file, the FastAPI app, and a client bound to it."""
from __future__ import annotations

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from tracker.api.app import create_app
from tracker.client.cache import FallbackCache
from tracker.client.state import ActivityStateManager
from tracker.store.document import DocumentStore

API_URL = "http://test/activities"


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "activities.json"


@pytest.fixture
def store(data_file):
    return DocumentStore(data_file)


@pytest.fixture
def app(data_file):
    return create_app(data_file)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def cache(tmp_path):
    return FallbackCache(tmp_path / "cache")


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def manager(app, cache, clock):
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    async with ActivityStateManager(
        api_url=API_URL, cache=cache, http_client=http_client, status_ttl=3.0, clock=clock,
    ) as m:
        yield m
    await http_client.aclose()


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest_asyncio.fixture
async def offline_manager(cache, clock):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_unreachable))
    async with ActivityStateManager(
        api_url=API_URL, cache=cache, http_client=http_client, status_ttl=3.0, clock=clock,
    ) as m:
        yield m
    await http_client.aclose()
